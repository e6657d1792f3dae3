from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DeviceInfo:
    """An audio input device as reported by PortAudio."""

    # PortAudio device index
    id: int

    name: str

    max_input_channels: int

    # Native rate of the device in Hz
    default_sample_rate: int

    # Whether the device accepts mono 16 kHz int16 capture
    supports_capture_format: bool = False

    is_default: bool = False

    # Raw PortAudio device dictionary
    extra_info: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_portaudio(cls, info: Dict[str, Any], default_index: Optional[int] = None,
                       supports_capture_format: bool = False) -> 'DeviceInfo':
        """
        Build from a dictionary returned by PyAudio.get_device_info_by_index().

        Args:
            info: PortAudio device dictionary
            default_index: Index of the default input device, if any
            supports_capture_format: Result of the capture format check
        """
        index = int(info['index'])
        return cls(
            id=index,
            name=str(info.get('name', '')),
            max_input_channels=int(info.get('maxInputChannels', 0)),
            default_sample_rate=int(info.get('defaultSampleRate', 0)),
            supports_capture_format=supports_capture_format,
            is_default=index == default_index,
            extra_info=dict(info),
        )
