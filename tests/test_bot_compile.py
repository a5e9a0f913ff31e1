import py_compile
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def test_bot_and_main_compile() -> None:
    """The entry point modules should at least be syntactically valid."""
    for module in ("bot.py", "main.py", "commands/register.py"):
        py_compile.compile(str(ROOT / "rolecall_bot" / module), doraise=True)
