"""Exception hierarchy shared by the VK client, the tool catalogue and the transports."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class VKMCPError(Exception):
    """Base class for all errors raised by this package."""


class MissingAccessTokenError(VKMCPError):
    def __init__(self, message: str = "VK_ACCESS_TOKEN environment variable is required"):
        super().__init__(message)


class VKAPIError(VKMCPError):
    """VK answered with an ``error`` object instead of ``response``."""

    def __init__(
        self,
        method: str,
        error_code: int,
        error_msg: str,
        request_params: Optional[List[Dict[str, Any]]] = None,
        error_text: Optional[str] = None,
        captcha_sid: Optional[str] = None,
        captcha_img: Optional[str] = None,
        redirect_uri: Optional[str] = None,
    ):
        self.method = method
        self.error_code = error_code
        self.error_msg = error_msg
        self.request_params = request_params or []
        self.error_text = error_text
        self.captcha_sid = captcha_sid
        self.captcha_img = captcha_img
        self.redirect_uri = redirect_uri
        super().__init__(f"VK API Error: {error_msg} ({error_code})")

    @classmethod
    def from_payload(cls, method: str, error: Dict[str, Any]) -> "VKAPIError":
        """Decode the ``error`` object of a VK response body."""
        try:
            code = int(error.get("error_code", 0))
        except (TypeError, ValueError):
            code = 0
        request_params = [
            p for p in (error.get("request_params") or [])
            if p.get("key") != "access_token"
        ]
        return cls(
            method=method,
            error_code=code,
            error_msg=str(error.get("error_msg") or "Unknown error"),
            request_params=request_params,
            error_text=error.get("error_text"),
            captcha_sid=error.get("captcha_sid"),
            captcha_img=error.get("captcha_img"),
            redirect_uri=error.get("redirect_uri"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "method": self.method,
            "error_code": self.error_code,
            "error_msg": self.error_msg,
            "request_params": self.request_params,
        }
        for key in ("error_text", "captcha_sid", "captcha_img", "redirect_uri"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data


class VKNetworkError(VKMCPError):
    """The VK endpoint could not be reached or answered with a non-2xx status."""

    def __init__(self, method: str, message: str, status_code: Optional[int] = None):
        self.method = method
        self.status_code = status_code
        suffix = f" (HTTP {status_code})" if status_code else ""
        super().__init__(f"Network Error: {message}{suffix}")

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method, "status_code": self.status_code}


class VKUploadError(VKMCPError):
    """A step of a media upload handshake failed."""


class UnknownToolError(VKMCPError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidToolArguments(VKMCPError):
    def __init__(self, name: str, errors: List[Dict[str, Any]]):
        self.name = name
        self.errors = [
            {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg"), "type": err.get("type")}
            for err in errors
        ]
        details = "; ".join(
            "%s: %s" % (".".join(err["loc"]) or "arguments", err["msg"])
            for err in self.errors
        )
        super().__init__(f"Invalid arguments for {name}: {details}")
