import re

from grouplog.logging.log_level import LogLevel

ANSI_COLOR_BG_RED = "\x1b[41m"
ANSI_COLOR_RED = "\x1b[31m"
ANSI_COLOR_YELLOW = "\x1b[33m"
ANSI_COLOR_RESET = "\x1b[0m"

LEVEL_STYLES = {
    LogLevel.fatal: ANSI_COLOR_BG_RED,
    LogLevel.error: ANSI_COLOR_RED,
    LogLevel.warn: ANSI_COLOR_YELLOW,
}

# Continuation lines line up under the message column of
# "[    0.000000] I: "
LOG_INDENT = " " * 18

_ANSI_ESCAPE_RE = re.compile(
    r"""
    \x1b
    (?:
        \[[0-?]*[ -/]*[@-~]?                # CSI, possibly cut short
      | \][^\x07\x1b]*(?:\x07|\x1b\\)?      # OSC: titles, hyperlinks
      | [ -/]+[0-~]?                        # nF: charset designation
      | [0-~]                               # Fp/Fe/Fs: ESC 7, ESC =, ESC c
    )?
    """,
    re.VERBOSE,
)


def style_for(level: LogLevel) -> str:
    return LEVEL_STYLES.get(level, "")


def strip_ansi_escapes(text: str) -> str:
    return _ANSI_ESCAPE_RE.sub("", text)


def indent_lines(message: str) -> str:
    return message.replace("\n", "\n" + LOG_INDENT)
