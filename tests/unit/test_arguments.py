"""Unit tests for tool argument extraction and repair."""

import pytest

from reactAgent.orchestration.arguments import (
    DEFAULT_COMMAND,
    extract_command_from_description,
    infer_tool_from_description,
    is_placeholder,
    parse_tool_arguments,
    split_literal_args,
    validate_and_fix_arguments,
)


class TestPlaceholders:

    @pytest.mark.parametrize("value", [None, "", "  ", "args", "...", "TODO", "<command>", "{{ path }}", "${CMD}"])
    def test_placeholder_values(self, value):
        assert is_placeholder(value)

    @pytest.mark.parametrize("value", ["npm install", "src/app.ts", 0, False])
    def test_real_values(self, value):
        assert not is_placeholder(value)

    def test_empty_allowed_when_requested(self):
        assert not is_placeholder("", allow_empty=True)


class TestSplitLiteralArgs:

    def test_commas_inside_quotes_are_kept(self):
        assert split_literal_args('"a.txt", "hello, world"') == ["a.txt", "hello, world"]

    def test_unquoted_parts(self):
        assert split_literal_args("config.json, updated") == ["config.json", "updated"]

    def test_empty_string(self):
        assert split_literal_args("") == []


class TestCommandInference:
    """Heuristics are ordered; the first one that matches wins."""

    def test_directory_creation_uses_quoted_token(self):
        assert extract_command_from_description("Create a new directory 'my-app'") == "mkdir -p my-app"

    def test_directory_creation_uses_backticked_name(self):
        assert extract_command_from_description("Create a new directory `my-app`") == "mkdir -p my-app"

    def test_directory_creation_without_name(self):
        assert extract_command_from_description("Make a folder for sources") == "mkdir -p my-app"

    def test_inline_code_wins(self):
        assert extract_command_from_description("Run `ls -la` to look around") == "ls -la"

    def test_generator(self):
        command = extract_command_from_description("Scaffold a Next.js project called 'shop'")
        assert command.startswith("npx create-next-app@latest shop")

    def test_install(self):
        assert extract_command_from_description("Install dependencies") == "npm install"

    def test_python_install(self):
        assert extract_command_from_description("Install python requirements") == "pip install -r requirements.txt"

    def test_init(self):
        assert extract_command_from_description("Initialize the package") == "npm init -y"

    def test_build(self):
        assert extract_command_from_description("Build the bundle") == "npm run build"

    def test_dev_server(self):
        assert extract_command_from_description("Start the dev server") == "npm run dev"

    def test_tests(self):
        assert extract_command_from_description("Test everything") == "npm test"

    def test_generic_verb_object(self):
        assert extract_command_from_description("Execute the cleanup script") == "the cleanup script"

    def test_fallback_echo(self):
        assert extract_command_from_description("Think about it") == DEFAULT_COMMAND


class TestToolInference:

    @pytest.mark.parametrize(
        "description,tool",
        [
            ("Read the config file", "read_file"),
            ("Write the README", "write_file"),
            ("Create index file", "write_file"),
            ("List the sources", "list_files"),
            ("Inspect directory layout", "list_files"),
            ("Install dependencies", "run_command"),
        ],
    )
    def test_keywords(self, description, tool):
        assert infer_tool_from_description(description) == tool


class TestParseToolArguments:

    def test_json_first(self):
        args = parse_tool_arguments("write_file", '{"file_path": "a.txt", "content": "x"}', "")
        assert args == {"file_path": "a.txt", "content": "x"}

    def test_invalid_json_falls_through(self):
        args = parse_tool_arguments("read_file", "{not json", "")
        assert args == {"file_path": "{not json"}

    def test_run_command_with_cwd(self):
        assert parse_tool_arguments("run_command", '"npm install", "my-app"', "") == {
            "command": "npm install",
            "cwd": "my-app",
        }

    def test_run_command_placeholder_uses_description(self):
        args = parse_tool_arguments("run_command", "args", "Create a new directory 'my-app'")
        assert args == {"command": "mkdir -p my-app", "cwd": "."}

    def test_write_file_defaults_from_description(self):
        args = parse_tool_arguments("write_file", "", "Create 'index.ts' with a greeting")
        assert args == {"file_path": "index.ts", "content": "// Generated file"}

    def test_write_file_generic_defaults(self):
        args = parse_tool_arguments("write_file", "", "Write something")
        assert args == {"file_path": "file.txt", "content": "// Generated file"}

    def test_read_file_from_quoted_token(self):
        assert parse_tool_arguments("read_file", "", "Open 'src/app.ts'") == {"file_path": "src/app.ts"}

    def test_get_file_info_defaults_to_current_dir(self):
        assert parse_tool_arguments("get_file_info", "", "Inspect it") == {"file_path": "."}

    def test_list_files_default(self):
        assert parse_tool_arguments("list_files", "", "") == {"directory_path": "."}

    def test_search_files(self):
        assert parse_tool_arguments("search_files", "*.ts, src", "") == {"pattern": "*.ts", "directory": "src"}

    def test_search_replace_three_parts(self):
        args = parse_tool_arguments("search_replace", 'a.txt, "old", "new"', "")
        assert args == {"file_path": "a.txt", "search": "old", "replace": "new"}

    def test_unknown_tool_key_value_pairs(self):
        args = parse_tool_arguments("fetch_url", "url: https://example.com, depth: 2", "")
        assert args == {"url": "https://example.com", "depth": "2"}

    def test_unknown_tool_bare_value_by_name(self):
        assert parse_tool_arguments("open_file", "notes.md", "") == {"file_path": "notes.md"}
        assert parse_tool_arguments("shell_command", "ls", "") == {"command": "ls"}


class TestValidateAndFix:

    def test_missing_command_is_rederived(self):
        args = validate_and_fix_arguments("run_command", {}, "Create a new directory 'my-app'")
        assert args == {"command": "mkdir -p my-app", "cwd": "."}

    def test_placeholder_command_is_rederived(self):
        args = validate_and_fix_arguments("run_command", {"command": "<command>"}, "Create a new directory 'my-app'")
        assert args == {"command": "mkdir -p my-app", "cwd": "."}

    def test_supplied_values_are_kept(self):
        original = {"command": "ls", "cwd": "src"}
        args = validate_and_fix_arguments("run_command", original, "Install dependencies")
        assert args == {"command": "ls", "cwd": "src"}
        assert args is not original

    def test_write_file_empty_content_is_kept(self):
        args = validate_and_fix_arguments("write_file", {"file_path": "empty.txt", "content": ""}, "")
        assert args == {"file_path": "empty.txt", "content": ""}

    @pytest.mark.parametrize("content", ["<App />", "null", "TODO", "{name}", "..."])
    def test_write_file_content_is_never_rewritten(self, content):
        args = validate_and_fix_arguments("write_file", {"file_path": "src/App.tsx", "content": content}, "Write the app")
        assert args == {"file_path": "src/App.tsx", "content": content}

    def test_write_file_none_content_is_filled(self):
        args = validate_and_fix_arguments("write_file", {"file_path": "a.md", "content": None}, "")
        assert args == {"file_path": "a.md", "content": "// Generated file"}

    def test_write_file_missing_content(self):
        args = validate_and_fix_arguments("write_file", {"file_path": "a.md"}, "")
        assert args == {"file_path": "a.md", "content": "// Generated file"}

    def test_list_files_placeholder(self):
        assert validate_and_fix_arguments("list_files", {"directory_path": "..."}, "") == {"directory_path": "."}

    def test_unknown_tool_untouched(self):
        assert validate_and_fix_arguments("custom", {"x": "args"}, "") == {"x": "args"}
