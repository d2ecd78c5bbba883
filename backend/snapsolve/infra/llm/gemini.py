from __future__ import annotations

import base64
import http.client
import io
import json
import logging
import socket
from urllib import error as urlerror
from urllib import parse, request

from PIL import Image, UnidentifiedImageError

from snapsolve.core.errors import ExtractionTimeoutError, TransportError
from snapsolve.infra.ports.llm import VisionLLMPort

logger = logging.getLogger(__name__)

_GOOGLE_AI_BASE = "https://generativelanguage.googleapis.com/v1beta"
_MIN_SIDE = 900
_MIN_QUALITY = 55


def _is_timeout_error(exc: BaseException) -> bool:
    reason = getattr(exc, "reason", None)
    message = f"{exc} {reason or ''}".lower()
    return (
        isinstance(exc, (TimeoutError, socket.timeout))
        or isinstance(reason, (TimeoutError, socket.timeout))
        or "timed out" in message
    )


def compact_image(media_bytes: bytes, media_mime_type: str, max_bytes: int) -> tuple[bytes, str]:
    """Shrink an oversized image to fit the inline-data budget, re-encoding it as JPEG."""
    if len(media_bytes) <= max_bytes:
        return media_bytes, media_mime_type

    try:
        image = Image.open(io.BytesIO(media_bytes))
        work = image.convert("RGB")
    except (UnidentifiedImageError, OSError) as exc:
        # Not decodable here; let the model reject it if it must.
        logger.warning("Could not re-encode oversized image (%d bytes): %s", len(media_bytes), exc)
        return media_bytes, media_mime_type

    max_side = 2200
    quality = 85
    while True:
        resized = work
        longest = max(resized.width, resized.height)
        if longest > max_side:
            ratio = max_side / float(longest)
            resized = resized.resize(
                (max(1, int(resized.width * ratio)), max(1, int(resized.height * ratio))),
                Image.Resampling.LANCZOS,
            )

        buf = io.BytesIO()
        resized.save(buf, format="JPEG", quality=quality, optimize=True)
        packed = buf.getvalue()
        if len(packed) <= max_bytes or (max_side <= _MIN_SIDE and quality <= _MIN_QUALITY):
            return packed, "image/jpeg"

        max_side = max(_MIN_SIDE, int(max_side * 0.85))
        quality = max(_MIN_QUALITY, quality - 10)


class GeminiVisionLLM(VisionLLMPort):
    provider_name = "gemini"

    def __init__(
        self,
        *,
        api_key: str,
        model_name: str,
        timeout_seconds: int = 60,
        max_media_bytes: int = 3_500_000,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_seconds = max(3, int(timeout_seconds))
        self.max_media_bytes = max(1, int(max_media_bytes))

    def generate_text_from_media(
        self,
        *,
        prompt: str,
        media_bytes: bytes,
        media_mime_type: str,
        system_prompt: str | None = None,
        model: str | None = None,
    ) -> str:
        media_bytes, media_mime_type = compact_image(media_bytes, media_mime_type, self.max_media_bytes)
        encoded = base64.b64encode(media_bytes).decode("ascii")
        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": prompt[:12000]},
                        {
                            "inlineData": {
                                "mimeType": media_mime_type,
                                "data": encoded,
                            }
                        },
                    ],
                }
            ],
            "generationConfig": {
                "temperature": 0,
            },
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt[:6000]}]}
        return self._request_text(payload=payload, model=model)

    def _request_text(self, *, payload: dict, model: str | None) -> str:
        model_name = model or self.model_name
        url = (
            f"{_GOOGLE_AI_BASE}/models/{parse.quote(model_name)}:generateContent"
            f"?key={parse.quote(self.api_key)}"
        )
        req = request.Request(
            url=url,
            method="POST",
            data=json.dumps(payload).encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )

        try:
            with request.urlopen(req, timeout=self.timeout_seconds) as resp:
                body = resp.read().decode("utf-8")
        except urlerror.HTTPError as exc:
            try:
                detail = exc.read().decode("utf-8")
            except OSError:
                detail = str(exc)
            raise TransportError(f"Gemini API error ({exc.code}): {detail[:400]}") from exc
        except urlerror.URLError as exc:
            if _is_timeout_error(exc):
                raise ExtractionTimeoutError(
                    f"Gemini API timeout (timeout={self.timeout_seconds}s)."
                ) from exc
            raise TransportError(f"Gemini API connection error: {exc}") from exc
        except (TimeoutError, socket.timeout) as exc:
            raise ExtractionTimeoutError(f"Gemini API timeout (timeout={self.timeout_seconds}s).") from exc
        except (OSError, http.client.HTTPException) as exc:
            raise TransportError(f"Gemini API connection error: {exc!r}") from exc

        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as exc:
            raise TransportError("Gemini response is not valid JSON") from exc
        if not isinstance(parsed, dict):
            raise TransportError("Gemini response is not a JSON object")

        candidates = parsed.get("candidates") or []
        if not candidates:
            raise TransportError(f"Gemini response has no candidates: {parsed.get('promptFeedback') or 'empty'}")

        parts = ((candidates[0].get("content") or {}).get("parts") or [])
        text = "".join(part.get("text") or "" for part in parts if isinstance(part, dict))
        if not text.strip():
            raise TransportError("Gemini response does not contain any text")
        return text
