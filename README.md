# bunster

Building blocks for turning shell scripts into standalone programs: a token
model for the shell language, a small runtime that models a running shell
(variables, positional arguments, functions, file descriptors, commands),
built-in commands, and helpers for writing and checking compiler tests.

## Install

    pip install bunster

The tests need the `test` extra:

    pip install "bunster[test]"

## Modules

- `bunster.token` – `TokenType` (an `IntEnum` of every token kind), the frozen
  `Token` dataclass (`type`, `line`, `position`, `literal`; `str()` gives the
  text used in messages, e.g. `"end of file"` or `"$name"`), the `KEYWORDS`
  table and `lookup_keyword(word)`, which returns the keyword's type or `None`.
- `bunster.diff` – `diff(original, modified)` and `diff_bg(original, modified)`
  return a line-based diff coloured with ANSI foreground or background
  colours; `compute_diff(original_lines, modified_lines)` returns the list of
  `DiffOperation(type, line)` records (`"add"`, `"delete"`, `"unchanged"`).
- `bunster.dottest` – `parse(text)` reads the `#(TEST: label)` / `#(RESULT)` /
  `#(ENDTEST)` format into a list of `DotTest(label, input, output)` and raises
  `DotTestSyntaxError` with the offending line number on malformed input.
- `bunster.stream` – `Buffer` (an in-memory stream with `read`, `write`,
  `close` and `string`), `StreamManager` (a table of named file descriptors
  with `open_stream`, `add`, `get`, `duplicate`, `close`, `destroy`, `clone`;
  usable as a context manager that calls `destroy`), `new_pipe()`,
  `new_buffered_stream(text)` and the `STREAM_FLAG_*` open flags. Invalid
  operations raise `StreamError`. `/dev/stdin`, `/dev/stdout` and
  `/dev/stderr` given to `open_stream` refer to descriptors `0`, `1` and `2`
  of the table.
- `bunster.shell` – `Shell` holds global, local, environment and exported
  variables, positional arguments, registered functions and deferred
  handlers (`read_var`, `set_var`, `set_local_var`, `set_export_var`,
  `read_special_var`, `shift`, `clone`, `defer`, `terminate`,
  `handle_error`, ...). `Shell.command(name, *args)` returns a `Command`
  that runs a registered function in a thread or an external program with
  `subprocess`; `run()`/`wait()` raise `ExitError` on a non-zero exit code.
- `bunster.arithmetic` – integer helpers for arithmetic expansion:
  `parse_int`, `format_int`, `var_increment`, `negate_int`, `int_power`,
  `compare_int` and `conditional_int`.
- `bunster.fileutils` – the tests behind conditional expressions:
  `file_exists`, `directory_exists`, `regular_file_exists`, `file_is_symbolic`,
  `file_is_older_than`, `files_have_same_dev_and_ino`, `number_compare`,
  `file_descriptor_is_terminal` and the rest. Errors while looking at a file
  give `False`.
- `bunster.loadenv` – `parse_env(text)` and `read_env_file(filename)` read
  dotenv documents (comments, `export` prefixes, quoted values, `$NAME` /
  `${NAME}` expansion via `expand_variables`), raising `EnvParseError` when
  malformed; `loadenv` is the built-in command, which loads `.env` by default
  and marks the variables as exported with `-X`.
- `bunster.builtins` – `register(shell)` installs the built-ins `true`,
  `false`, `loadenv`, `embed` (`embed cat PATH`, `embed ls PATH` over the
  directory given as `Shell(embed=...)`) and `shift`.

## Example

    from bunster.dottest import parse
    from bunster.diff import diff

    tests = parse("#(TEST: echo)\necho hi\n#(RESULT)\nhi\n#(ENDTEST)\n")
    print(tests[0].label)          # echo
    print(diff("a\nb", "a\nc"))

Running a built-in through the runtime:

    from bunster.shell import Shell, ExitError
    from bunster.builtins import register

    shell = Shell()
    register(shell)
    try:
        shell.command("false").run()
    except ExitError as error:
        print(error.code)          # 1

## What this package does not do

It contains no scanner that turns script text into tokens, no parser that
builds a syntax tree, no code generator and no command-line tool. The token
types, runtime and built-ins here are the pieces such a compiler would use;
compiling a script end to end is not something this package can do on its
own.