"""Pydantic models for profile parsing.

These models validate the raw YAML/JSON profile document. The loader
converts them to the frozen runtime types in ``mkvbatch.policy.types``.

- PredicateModel / TitlePredicateModel / TitleRuleModel: track predicates
- ConversionModel: per-category conversion request
- TrackPolicyModel: per-category retention policy
- AttachmentsModel, ChaptersModel, OtherTracksModel: container items
- TrackParamsModel: per-output-track overrides
- RunCommandModel, MiscModel: hooks and batch behavior
- SubstitutionsModel: name-list sanitization
- ProcessingParamsModel, ProfileModel: top level
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mkvbatch.domain.enums import HookStage
from mkvbatch.policy.conversion import AudioCodec

DeletionModeLiteral = Literal["none", "delete", "trash"]


class TitleRuleModel(BaseModel):
    """A single title test: exactly one of contains, equals or regex."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    contains: str | None = None
    equals: str | None = None
    regex: str | None = None

    @model_validator(mode="after")
    def validate_exactly_one(self) -> "TitleRuleModel":
        """Ensure exactly one rule kind is given."""
        given = [v for v in (self.contains, self.equals, self.regex) if v is not None]
        if len(given) != 1:
            raise ValueError(
                "Title rule must specify exactly one of 'contains', 'equals' "
                "or 'regex'"
            )
        return self


class TitlePredicateModel(BaseModel):
    """Pydantic model for a title predicate."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    combinator: Literal["and", "or", "not"] = "and"
    rules: list[TitleRuleModel] = Field(default_factory=list)

    @field_validator("combinator", mode="before")
    @classmethod
    def normalize_combinator(cls, v: Any) -> Any:
        """Accept upper-case combinator names (AND/OR/NOT)."""
        if isinstance(v, str):
            return v.casefold()
        return v


class PredicateModel(BaseModel):
    """Pydantic model for a track predicate.

    At most one of index, language or title may be given; an empty mapping
    matches every track.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: list[int] | None = None
    language: list[str] | None = None
    title: TitlePredicateModel | None = None

    @field_validator("index")
    @classmethod
    def validate_indices(cls, v: list[int] | None) -> list[int] | None:
        """Reject negative track indices."""
        if v is not None:
            for idx, value in enumerate(v):
                if value < 0:
                    raise ValueError(f"Invalid negative index {value} at index[{idx}]")
        return v

    @model_validator(mode="after")
    def validate_single_kind(self) -> "PredicateModel":
        """Ensure at most one predicate kind is given."""
        given = [
            name
            for name in ("index", "language", "title")
            if getattr(self, name) is not None
        ]
        if len(given) > 1:
            raise ValueError(
                f"Predicate must use only one of index, language or title, "
                f"got: {', '.join(given)}"
            )
        return self


class ConversionModel(BaseModel):
    """Pydantic model for a conversion request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    codec: AudioCodec | None = None
    bitrate: int | None = None
    channels: int | None = None
    vbr: str | None = None
    compression_level: int | None = None
    threads: int | None = None

    @field_validator("vbr", mode="before")
    @classmethod
    def normalize_vbr(cls, v: Any) -> Any:
        """Normalize YAML booleans and integers to vbr strings.

        YAML parses bare ``on``/``off`` as booleans and libfdk modes as ints.
        """
        if isinstance(v, bool):
            return "on" if v else "off"
        if isinstance(v, int):
            return str(v)
        return v


class TrackPolicyModel(BaseModel):
    """Pydantic model for a per-category retention policy."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    predicate: PredicateModel | None = None
    total_to_retain: int | None = Field(default=None, ge=0)
    default_language: str | None = None
    conversion: ConversionModel | None = None

    @field_validator("default_language")
    @classmethod
    def validate_default_language(cls, v: str | None) -> str | None:
        """Reject blank default languages."""
        if v is not None and not v.strip():
            raise ValueError("default_language cannot be empty")
        return v.strip() if v is not None else v


class OtherTracksModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    import_from_original: bool = False


class AttachmentsModel(BaseModel):
    """Pydantic model for attachment import configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    import_from_original: bool = False
    import_original_extensions: list[str] = Field(default_factory=list)
    import_from_folder: str | None = None
    import_folder_extensions: list[str] = Field(default_factory=list)


class ChaptersModel(BaseModel):
    """Pydantic model for chapter import and generation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    import_from_original: bool = False
    create_if_not_present: bool = False
    create_interval: str | None = None
    language: str | None = None


class TrackParamsModel(BaseModel):
    """Pydantic model for per-output-track overrides."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int = Field(ge=0)
    default: bool | None = None
    enabled: bool | None = None
    forced: bool | None = None
    hearing_impaired: bool | None = None
    visual_impaired: bool | None = None
    text_descriptions: bool | None = None
    original: bool | None = None
    commentary: bool | None = None
    delay_override: int | None = None


class RunCommandModel(BaseModel):
    """Pydantic model for a hook command."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    stage: HookStage
    command: list[str] = Field(min_length=1)

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: list[str]) -> list[str]:
        """Require a non-empty executable path."""
        if not v[0].strip():
            raise ValueError("command path cannot be empty")
        return v


class MiscModel(BaseModel):
    """Pydantic model for miscellaneous batch settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    remove_original_file: DeletionModeLiteral | None = None
    remove_temp_files: DeletionModeLiteral | None = "delete"
    set_file_title: bool = True
    shutdown_upon_completion: bool = False
    tags_path: str | None = None
    run: list[RunCommandModel] = Field(default_factory=list)
    on_error: Literal["fail", "continue"] = "fail"
    reject_unknown_codecs: bool = False


class SubstitutionsModel(BaseModel):
    """Pydantic model for name-list sanitization."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    convert_to_proper_title_case: bool = True
    regular_expressions: list[tuple[str, str]] = Field(default_factory=list)
    strings: list[tuple[str, str]] = Field(default_factory=list)
    strip_invalid_ntfs_chars: bool = True
    fix_case_after_dashes: bool = True


class ProcessingParamsModel(BaseModel):
    """Pydantic model for the per-file processing parameters."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    audio_tracks: TrackPolicyModel = Field(default_factory=TrackPolicyModel)
    subtitle_tracks: TrackPolicyModel = Field(default_factory=TrackPolicyModel)
    video_tracks: TrackPolicyModel = Field(default_factory=TrackPolicyModel)
    other_tracks: OtherTracksModel = Field(default_factory=OtherTracksModel)
    attachments: AttachmentsModel = Field(default_factory=AttachmentsModel)
    chapters: ChaptersModel = Field(default_factory=ChaptersModel)
    track_params: list[TrackParamsModel] = Field(default_factory=list)
    misc: MiscModel = Field(default_factory=MiscModel)

    @model_validator(mode="after")
    def validate_conversion_categories(self) -> "ProcessingParamsModel":
        """Reject conversions for categories that cannot be converted."""
        for name in ("subtitle_tracks", "video_tracks"):
            conversion = getattr(self, name).conversion
            if conversion is not None and conversion.codec is not None:
                raise ValueError(f"Conversion of {name} is not supported")
        return self

    @model_validator(mode="after")
    def validate_unique_track_params(self) -> "ProcessingParamsModel":
        """Reject duplicate track_params ids."""
        seen: set[int] = set()
        for params in self.track_params:
            if params.id in seen:
                raise ValueError(f"Duplicate track_params id {params.id}")
            seen.add(params.id)
        return self


class ProfileModel(BaseModel):
    """Pydantic model for a complete profile document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    input_dir: str
    output_dir: str
    output_names_file_path: str
    start_from: int = Field(default=1, ge=0)
    index_pad_type: Literal["none", "ten", "hundred", "thousand"] = "none"
    substitutions: SubstitutionsModel = Field(default_factory=SubstitutionsModel)
    processing_params: ProcessingParamsModel = Field(
        default_factory=ProcessingParamsModel
    )
