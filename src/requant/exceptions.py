"""
requant Exception Hierarchy

Custom exceptions raised when a decomposition precondition fails.
Every exception carries the reason code that triggered it, so callers
can branch on ``err.reason`` the same way they branch on a
``ValidationResult``.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence

from requant.reasons import ALL_REASON_CODES, CONFIG_VALIDATION_FAILED, ReasonCategory


class RequantError(Exception):
    """Base exception for all requant errors.

    All requant-specific exceptions inherit from this class,
    allowing users to catch all requant errors with a single
    except clause.

    Attributes:
        message: Human-readable error description.
        reason: Reason code (see ``requant.reasons``), if any.
        context: Optional dict of additional context for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        """Initialize RequantError.

        Args:
            message: Error message.
            reason: Reason code.
            context: Optional context dict.
        """
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.context = context or {}

    @property
    def category(self) -> Optional[ReasonCategory]:
        """Category of the reason code, or None if there is no code."""
        return ALL_REASON_CODES.get(self.reason)

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        ctx_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{ctx_str})"


class InvalidMultiplierError(RequantError, ValueError):
    """Raised when a real multiplier cannot be decomposed.

    This occurs when:
    - The multiplier is negative
    - The multiplier is NaN or infinite
    - A specialized decomposer receives a value outside its range

    Attributes:
        multiplier: The offending value.
    """

    def __init__(
        self,
        multiplier: float,
        *,
        reason: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.multiplier = multiplier

        if message is None:
            message = f"Cannot decompose multiplier {multiplier!r}"

        super().__init__(
            message,
            reason=reason,
            context={"multiplier": multiplier},
        )


class UnsupportedTypeError(RequantError, LookupError):
    """Raised when a data type has no quantized range.

    Attributes:
        data_type: The type tag that was looked up.
        supported: Type tags that do have a range.
    """

    def __init__(
        self,
        data_type: Any,
        *,
        supported: Optional[Sequence[str]] = None,
        reason: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.data_type = data_type
        self.supported = list(supported) if supported else []

        if message is None:
            message = f"Data type {data_type!r} is not a supported quantized type"
            if self.supported:
                message += f" (supported: {', '.join(self.supported)})"

        super().__init__(
            message,
            reason=reason,
            context={"data_type": str(data_type), "supported": self.supported},
        )


class InvalidChannelCountError(RequantError, ValueError):
    """Raised when the output-channel count cannot be reconciled.

    This occurs when:
    - A per-channel scale sequence length differs from the channel count
    - The channel count is not a positive integer
    - The channel axis does not exist in the weight descriptor

    Attributes:
        expected: Channel count the caller asked for (if known).
        got: Channel count actually found (if known).
    """

    def __init__(
        self,
        message: str,
        *,
        expected: Optional[int] = None,
        got: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.expected = expected
        self.got = got

        super().__init__(
            message,
            reason=reason,
            context={"expected": expected, "got": got},
        )


class InvalidScaleError(RequantError, ValueError):
    """Raised when a quantization scale is unusable.

    Scales must be strictly positive and finite. Input and output
    quantization must be per-tensor.

    Attributes:
        role: Which tensor the scale belongs to ("input", "weight", "output"),
            or "effective" for a combined per-channel multiplier.
        scale: The offending scale value, if a single value is at fault.
        channel: Channel index of the offending scale, if per-channel.
    """

    def __init__(
        self,
        role: str,
        *,
        scale: Optional[float] = None,
        channel: Optional[int] = None,
        reason: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.role = role
        self.scale = scale
        self.channel = channel

        if message is None:
            where = f" (channel {channel})" if channel is not None else ""
            message = f"Invalid {role} scale {scale!r}{where}"

        super().__init__(
            message,
            reason=reason,
            context={"role": role, "scale": scale, "channel": channel},
        )


class BufferTooSmallError(RequantError, ValueError):
    """Raised when a caller-supplied output buffer cannot hold every channel.

    This occurs when:
    - The buffer has fewer slots than output channels
    - A tensor buffer is not 1-D
    - A tensor buffer dtype is not torch.int32 or torch.int64

    Attributes:
        buffer_name: Which buffer is too small.
        capacity: Capacity of the buffer.
        required: Number of slots that would be written.
    """

    def __init__(
        self,
        buffer_name: str,
        capacity: int,
        required: int,
        *,
        reason: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.buffer_name = buffer_name
        self.capacity = capacity
        self.required = required

        if message is None:
            message = (
                f"Buffer '{buffer_name}' holds {capacity} elements "
                f"but {required} channels must be written"
            )

        super().__init__(
            message,
            reason=reason,
            context={
                "buffer_name": buffer_name,
                "capacity": capacity,
                "required": required,
            },
        )


class ConfigurationError(RequantError):
    """Raised when requant configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[Any] = None,
        got: Optional[Any] = None,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Error message.
            config_key: The configuration key with the error.
            expected: Expected value or type.
            got: Actual value received.
        """
        self.config_key = config_key
        self.expected = expected
        self.got = got

        super().__init__(
            message,
            reason=CONFIG_VALIDATION_FAILED,
            context={
                "config_key": config_key,
                "expected": expected,
                "got": got,
            },
        )
