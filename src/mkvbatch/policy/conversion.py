"""Audio conversion parameters and ffmpeg argument building.

This module defines the supported target codecs for audio conversion, the
validation rules for their encoder options, and the translation of a
validated parameter set into an ffmpeg argument list.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mkvbatch.domain.enums import Codec
from mkvbatch.policy.exceptions import ConversionParamsError


class AudioCodec(Enum):
    """Target codec for audio conversion."""

    AAC = "aac"
    AAC_LIBFDK = "aac_libfdk"
    AC3 = "ac3"
    EAC3 = "eac3"
    FLAC = "flac"
    MP2 = "mp2"
    MP3_LAME = "mp3_lame"
    MP3_SHINE = "mp3_shine"
    OPUS = "opus"
    VORBIS = "vorbis"
    WAVPACK = "wavpack"

    @property
    def encoder(self) -> str:
        """ffmpeg encoder name."""
        return AUDIO_ENCODERS[self]

    @property
    def codec(self) -> Codec:
        """Internal codec of the converted stream."""
        return AUDIO_TARGET_CODECS[self]


AUDIO_ENCODERS: dict[AudioCodec, str] = {
    AudioCodec.AAC: "aac",
    AudioCodec.AAC_LIBFDK: "libfdk_aac",
    AudioCodec.AC3: "ac3",
    AudioCodec.EAC3: "eac3",
    AudioCodec.FLAC: "flac",
    AudioCodec.MP2: "libtwolame",
    AudioCodec.MP3_LAME: "libmp3lame",
    AudioCodec.MP3_SHINE: "libshine",
    AudioCodec.OPUS: "libopus",
    AudioCodec.VORBIS: "libvorbis",
    AudioCodec.WAVPACK: "wavpack",
}

AUDIO_TARGET_CODECS: dict[AudioCodec, Codec] = {
    AudioCodec.AAC: Codec.AAC,
    AudioCodec.AAC_LIBFDK: Codec.AAC,
    AudioCodec.AC3: Codec.AC3,
    AudioCodec.EAC3: Codec.EAC3,
    AudioCodec.FLAC: Codec.FLAC,
    AudioCodec.MP2: Codec.MP2,
    AudioCodec.MP3_LAME: Codec.MP3,
    AudioCodec.MP3_SHINE: Codec.MP3,
    AudioCodec.OPUS: Codec.OPUS,
    AudioCodec.VORBIS: Codec.VORBIS,
    AudioCodec.WAVPACK: Codec.WAVPACK,
}

LOSSLESS_CODECS = frozenset({AudioCodec.FLAC, AudioCodec.WAVPACK})

# Inclusive compression_level ranges per codec
COMPRESSION_LEVEL_RANGES: dict[AudioCodec, tuple[int, int]] = {
    AudioCodec.OPUS: (0, 10),
    AudioCodec.FLAC: (0, 12),
}

OPUS_VBR_MODES = ("off", "on", "constrained")
LIBFDK_VBR_MODES = ("1", "2", "3", "4", "5")

MAX_CHANNELS = 8


@dataclass(frozen=True)
class AudioConversionParams:
    """Audio conversion request for the kept audio tracks.

    With no codec set the parameters describe a stream copy and no
    conversion is run.
    """

    codec: AudioCodec | None = None
    bitrate: int | None = None  # kbit/s
    channels: int | None = None
    vbr: str | None = None
    compression_level: int | None = None
    threads: int | None = None

    def validate(self) -> list[str]:
        """Validate the parameters against the codec.

        Returns:
            List of error messages; empty when the parameters are valid.
        """
        errors: list[str] = []
        if self.codec is None:
            return errors

        if self.bitrate is not None:
            if self.bitrate <= 0:
                errors.append(f"bitrate must be positive, got {self.bitrate}")
            elif self.codec in LOSSLESS_CODECS:
                errors.append(f"bitrate is not supported by lossless {self.codec.value}")

        if self.channels is not None and not 1 <= self.channels <= MAX_CHANNELS:
            errors.append(
                f"channels must be between 1 and {MAX_CHANNELS}, got {self.channels}"
            )

        if self.threads is not None and self.threads < 1:
            errors.append(f"threads must be at least 1, got {self.threads}")

        if self.compression_level is not None:
            bounds = COMPRESSION_LEVEL_RANGES.get(self.codec)
            if bounds is None:
                errors.append(
                    f"compression_level is not supported by {self.codec.value}"
                )
            elif not bounds[0] <= self.compression_level <= bounds[1]:
                errors.append(
                    f"compression_level for {self.codec.value} must be between "
                    f"{bounds[0]} and {bounds[1]}, got {self.compression_level}"
                )

        if self.vbr is not None:
            if self.codec == AudioCodec.OPUS:
                if self.vbr not in OPUS_VBR_MODES:
                    errors.append(
                        f"vbr for opus must be one of {', '.join(OPUS_VBR_MODES)}, "
                        f"got {self.vbr!r}"
                    )
            elif self.codec == AudioCodec.AAC_LIBFDK:
                if self.vbr not in LIBFDK_VBR_MODES:
                    errors.append(
                        f"vbr for aac_libfdk must be between 1 and 5, got {self.vbr!r}"
                    )
            else:
                errors.append(f"vbr is not supported by {self.codec.value}")

        return errors

    def output_path(self, file_in: Path) -> Path:
        """Path of the converted file: same stem, target codec extension."""
        if self.codec is None:
            return file_in
        return file_in.with_suffix(f".{self.codec.codec.extension}")

    def as_ffmpeg_arguments(self, file_in: Path, file_out: Path) -> list[str]:
        """Build the ffmpeg argument list for this conversion.

        Args:
            file_in: Source stream file.
            file_out: Destination file.

        Returns:
            ffmpeg arguments, without the executable and global flags.

        Raises:
            ConversionParamsError: If the parameters fail validation.
        """
        errors = self.validate()
        if errors:
            raise ConversionParamsError(errors)

        if self.codec is None:
            return ["-c:a", "copy"]

        args: list[str] = []
        if self.threads is not None:
            args.extend(["-threads", str(self.threads)])

        args.extend(["-i", str(file_in), "-c:a", self.codec.encoder])

        if self.bitrate is not None:
            args.extend(["-b:a", f"{self.bitrate}k"])
        if self.channels is not None:
            args.extend(["-ac", str(self.channels)])
        if self.compression_level is not None:
            args.extend(["-compression_level", str(self.compression_level)])
        if self.vbr is not None:
            args.extend(["-vbr", self.vbr])

        # Output path always goes last
        args.append(str(file_out))
        return args
