"""Show a command shell from one loading boundary driven through another's contracts."""

import argparse
import pathlib
import sys
import types

REPO_ROOT: pathlib.Path = pathlib.Path(__file__).resolve().parents[1]
DEFAULT_SHELL_DIR: pathlib.Path = REPO_ROOT / "tests" / "fixtures" / "shell"
PROCESSOR_TARGET: str = "shell_runtime:ConsoleProcessor"


def _ensure_src_path(src_path: str) -> None:
    """Ensure ``src`` is importable in the current interpreter.

    :param src_path: Absolute path to the repository ``src`` directory.
    """
    exists: bool = src_path in sys.path
    if exists is False:
        sys.path.insert(0, src_path)


def _parse_args() -> argparse.Namespace:
    """Parse command-line options.

    :returns: Parsed options.
    """
    parser = argparse.ArgumentParser(
        description="Drive a shell loaded behind one boundary through contracts loaded behind another."
    )
    parser.add_argument("--shell-dir", default=str(DEFAULT_SHELL_DIR), help="Directory holding shell_api/shell_runtime")
    parser.add_argument("--owner", default="demo", help="Session owner name")
    parser.add_argument("--verbose", action="store_true", help="Print reflectbridge debug records")
    parser.add_argument("commands", nargs="*", default=["ls", "echo hi"], help="Commands to execute")
    return parser.parse_args()


def main() -> int:
    """Run the demo.

    :returns: Process exit code.
    """
    _ensure_src_path(str(REPO_ROOT / "src"))
    from loguru import logger

    from reflectbridge import ModuleBoundary
    from reflectbridge import ReflectionError
    from reflectbridge import bridge

    args: argparse.Namespace = _parse_args()
    if args.verbose is True:
        logger.enable("reflectbridge")

    foreign_side: ModuleBoundary = ModuleBoundary([args.shell_dir])
    local_side: ModuleBoundary = ModuleBoundary([args.shell_dir])
    processor_class: type = foreign_side.load_type(PROCESSOR_TARGET)
    local_api: types.ModuleType = local_side.import_module("shell_api")

    foreign_processor: object = processor_class()
    direct_match: bool = isinstance(foreign_processor, local_api.CommandProcessor)
    print("Shell Bridge Demo")
    print(f"python={sys.version.split()[0]}")
    print(f"shell_dir={args.shell_dir}")
    print(f"foreign processor is a local CommandProcessor: {direct_match}")
    print("")

    processor: object = bridge(local_api.CommandProcessor, foreign_processor)
    session: object = processor.create_session(args.owner)  # type: ignore[attr-defined]
    print(f"session owner={session.owner}")  # type: ignore[attr-defined]
    exit_code: int = 0
    try:
        for command in args.commands:
            try:
                output: object = session.execute(command)  # type: ignore[attr-defined]
            except ReflectionError as exc:
                print(f"  command={command!r} status=error error={exc}")
                exit_code = 1
                continue
            print(f"  command={command!r} status=ok output={output}")
    finally:
        session.close()  # type: ignore[attr-defined]
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
