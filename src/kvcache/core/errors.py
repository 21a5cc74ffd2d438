from __future__ import annotations

import enum
import typing as t


class ErrorCode(str, enum.Enum):
    ENOTFOUND = "ENOTFOUND"
    ECACHEFULL = "ECACHEFULL"
    EKEYTYPE = "EKEYTYPE"
    EKEYSTYPE = "EKEYSTYPE"
    ETTLTYPE = "ETTLTYPE"


ERROR_MESSAGES: t.Dict[ErrorCode, str] = {
    ErrorCode.ENOTFOUND: "Key `{key}` not found",
    ErrorCode.ECACHEFULL: "Cache max keys amount exceeded",
    ErrorCode.EKEYTYPE: "The key argument has to be of type `str` or `int`. Found: `{type}`",
    ErrorCode.EKEYSTYPE: "The keys argument has to be a list or tuple.",
    ErrorCode.ETTLTYPE: "The ttl argument has to be a number.",
}


class _Default(dict):
    def __missing__(self, key: str) -> str:
        return ""


class CacheError(Exception):
    """Base class for cache failures.

    Carries a machine readable ``code`` (and its string form ``errorcode``),
    the rendered message and the offending context in ``data``.
    """

    code: t.ClassVar[ErrorCode]

    def __init__(self, data: t.Optional[t.Dict[str, t.Any]] = None) -> None:
        self.data: t.Dict[str, t.Any] = dict(data or {})
        self.errorcode = self.code.value
        self.message = ERROR_MESSAGES[self.code].format_map(_Default(self.data))
        super().__init__(self.message)


class KeyNotFoundError(CacheError, KeyError):
    code = ErrorCode.ENOTFOUND

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class CacheFullError(CacheError):
    code = ErrorCode.ECACHEFULL


class InvalidKeyTypeError(CacheError, TypeError):
    code = ErrorCode.EKEYTYPE


class KeysNotArrayError(CacheError, TypeError):
    code = ErrorCode.EKEYSTYPE


class InvalidTtlTypeError(CacheError, TypeError):
    code = ErrorCode.ETTLTYPE
