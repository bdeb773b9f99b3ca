"""Profile file loading and validation.

This module loads YAML (or JSON) profile files, validates them with the
Pydantic models and converts them into the frozen runtime types. Regex
patterns and conversion parameters are checked here so that every
configuration error surfaces before any media file is touched.
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mkvbatch.domain.enums import DeletionMode, HookStage
from mkvbatch.policy.conversion import AudioConversionParams
from mkvbatch.policy.exceptions import ProfileValidationError
from mkvbatch.policy.predicates import (
    IndexPredicate,
    LanguagePredicate,
    NonePredicate,
    TitleCombinator,
    TitlePredicate,
    TitleRule,
    TitleRuleKind,
    TrackPredicate,
    initialize_regex,
)
from mkvbatch.policy.pydantic_models import (
    AttachmentsModel,
    ChaptersModel,
    ConversionModel,
    MiscModel,
    PredicateModel,
    ProcessingParamsModel,
    ProfileModel,
    RunCommandModel,
    SubstitutionsModel,
    TitleRuleModel,
    TrackParamsModel,
    TrackPolicyModel,
)
from mkvbatch.policy.substitutions import Substitutions
from mkvbatch.policy.types import (
    DEFAULT_CHAPTER_INTERVAL,
    DEFAULT_CHAPTER_LANGUAGE,
    AttachmentParams,
    ChapterParams,
    HookCommand,
    MiscParams,
    OnErrorMode,
    OtherTracksParams,
    PadType,
    ProcessingParams,
    Profile,
    TrackParams,
    TrackPolicy,
)

logger = logging.getLogger(__name__)

TRACK_CATEGORIES = ("audio_tracks", "subtitle_tracks", "video_tracks")


def _convert_title_rule(model: TitleRuleModel) -> TitleRule:
    if model.contains is not None:
        return TitleRule(TitleRuleKind.CONTAINS, model.contains)
    if model.equals is not None:
        return TitleRule(TitleRuleKind.EQUALS, model.equals)
    return TitleRule(TitleRuleKind.REGEX, model.regex or "")


def _convert_predicate(model: PredicateModel | None) -> TrackPredicate:
    if model is None:
        return NonePredicate()
    if model.index is not None:
        return IndexPredicate(frozenset(model.index))
    if model.language is not None:
        return LanguagePredicate(tuple(model.language))
    if model.title is not None:
        return TitlePredicate(
            combinator=TitleCombinator(model.title.combinator),
            rules=tuple(_convert_title_rule(r) for r in model.title.rules),
        )
    return NonePredicate()


def _convert_conversion(model: ConversionModel | None) -> AudioConversionParams | None:
    if model is None:
        return None
    return AudioConversionParams(
        codec=model.codec,
        bitrate=model.bitrate,
        channels=model.channels,
        vbr=model.vbr,
        compression_level=model.compression_level,
        threads=model.threads,
    )


def _convert_track_policy(model: TrackPolicyModel, field: str) -> TrackPolicy:
    predicate = _convert_predicate(model.predicate)
    try:
        initialize_regex(predicate)
    except re.error as e:
        raise ProfileValidationError(
            f"Invalid regex in {field}.predicate: {e}", field=f"{field}.predicate"
        ) from e

    conversion = _convert_conversion(model.conversion)
    if conversion is not None:
        errors = conversion.validate()
        if errors:
            raise ProfileValidationError(
                f"Invalid {field}.conversion: {'; '.join(errors)}",
                field=f"{field}.conversion",
            )

    return TrackPolicy(
        predicate=predicate,
        total_to_retain=model.total_to_retain,
        default_language=model.default_language,
        conversion=conversion,
    )


def _convert_attachments(model: AttachmentsModel, base_dir: Path) -> AttachmentParams:
    folder = (
        _resolve_path(model.import_from_folder, base_dir)
        if model.import_from_folder
        else None
    )
    return AttachmentParams(
        import_from_original=model.import_from_original,
        import_original_extensions=tuple(model.import_original_extensions),
        import_from_folder=folder,
        import_folder_extensions=tuple(model.import_folder_extensions),
    )


def _convert_chapters(model: ChaptersModel) -> ChapterParams:
    return ChapterParams(
        import_from_original=model.import_from_original,
        create_if_not_present=model.create_if_not_present,
        create_interval=model.create_interval or DEFAULT_CHAPTER_INTERVAL,
        language=model.language or DEFAULT_CHAPTER_LANGUAGE,
    )


def _convert_track_params(model: TrackParamsModel) -> TrackParams:
    return TrackParams(**model.model_dump())


def _convert_deletion_mode(value: str | None) -> DeletionMode:
    return DeletionMode(value) if value is not None else DeletionMode.NONE


def _convert_hook(model: RunCommandModel, base_dir: Path) -> HookCommand:
    executable = str(_resolve_path(model.command[0], base_dir))
    return HookCommand(
        stage=HookStage(model.stage), command=(executable, *model.command[1:])
    )


def _convert_misc(model: MiscModel, base_dir: Path) -> MiscParams:
    return MiscParams(
        remove_original_file=_convert_deletion_mode(model.remove_original_file),
        remove_temp_files=_convert_deletion_mode(model.remove_temp_files),
        set_file_title=model.set_file_title,
        shutdown_upon_completion=model.shutdown_upon_completion,
        tags_path=_resolve_path(model.tags_path, base_dir) if model.tags_path else None,
        run=tuple(_convert_hook(r, base_dir) for r in model.run),
        on_error=OnErrorMode(model.on_error),
        reject_unknown_codecs=model.reject_unknown_codecs,
    )


def _convert_processing_params(
    model: ProcessingParamsModel, base_dir: Path
) -> ProcessingParams:
    policies = {
        name: _convert_track_policy(getattr(model, name), f"processing_params.{name}")
        for name in TRACK_CATEGORIES
    }
    return ProcessingParams(
        audio_tracks=policies["audio_tracks"],
        subtitle_tracks=policies["subtitle_tracks"],
        video_tracks=policies["video_tracks"],
        other_tracks=OtherTracksParams(
            import_from_original=model.other_tracks.import_from_original
        ),
        attachments=_convert_attachments(model.attachments, base_dir),
        chapters=_convert_chapters(model.chapters),
        track_params=tuple(_convert_track_params(p) for p in model.track_params),
        misc=_convert_misc(model.misc, base_dir),
    )


def _convert_substitutions(model: SubstitutionsModel) -> Substitutions:
    substitutions = Substitutions(
        convert_to_proper_title_case=model.convert_to_proper_title_case,
        regular_expressions=tuple(model.regular_expressions),
        strings=tuple(model.strings),
        strip_invalid_ntfs_chars=model.strip_invalid_ntfs_chars,
        fix_case_after_dashes=model.fix_case_after_dashes,
    )
    try:
        substitutions.initialize_regex()
    except re.error as e:
        raise ProfileValidationError(
            f"Invalid regex in substitutions.regular_expressions: {e}",
            field="substitutions.regular_expressions",
        ) from e
    return substitutions


def _resolve_path(value: str, base_dir: Path) -> Path:
    """Resolve a profile path relative to the profile's directory."""
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path


def _convert_to_profile(model: ProfileModel, base_dir: Path) -> Profile:
    return Profile(
        input_dir=_resolve_path(model.input_dir, base_dir),
        output_dir=_resolve_path(model.output_dir, base_dir),
        output_names_file_path=_resolve_path(model.output_names_file_path, base_dir),
        start_from=model.start_from,
        index_pad_type=PadType(model.index_pad_type),
        substitutions=_convert_substitutions(model.substitutions),
        processing_params=_convert_processing_params(
            model.processing_params, base_dir
        ),
    )


def load_profile(profile_path: Path) -> Profile:
    """Load and validate a profile from a YAML or JSON file.

    Relative paths inside the profile are resolved against the directory
    containing the profile file.

    Args:
        profile_path: Path to the profile file.

    Returns:
        Validated Profile.

    Raises:
        ProfileValidationError: If the profile file is invalid.
        FileNotFoundError: If the profile file does not exist.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile file not found: {profile_path}")

    try:
        with open(profile_path, encoding="utf-8-sig") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ProfileValidationError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise ProfileValidationError("Profile file is empty")

    if not isinstance(data, dict):
        raise ProfileValidationError("Profile file must be a YAML mapping")

    profile = load_profile_from_dict(data, base_dir=profile_path.resolve().parent)
    logger.info("Loaded profile %s", profile_path)
    return profile


def load_profile_from_dict(
    data: dict[str, Any], base_dir: Path | None = None
) -> Profile:
    """Load and validate a profile from a dictionary.

    Args:
        data: Dictionary containing the profile.
        base_dir: Directory that relative paths are resolved against
            (defaults to the current working directory).

    Returns:
        Validated Profile.

    Raises:
        ProfileValidationError: If the profile data is invalid.
    """
    try:
        model = ProfileModel.model_validate(data)
    except ValidationError as e:
        raise ProfileValidationError(_format_validation_error(e)) from e

    return _convert_to_profile(model, base_dir or Path.cwd())


def _format_validation_error(error: Exception) -> str:
    """Format a Pydantic validation error into a user-friendly message."""
    if isinstance(error, ValidationError):
        errors = error.errors()
        if errors:
            first_error = errors[0]
            loc = ".".join(str(x) for x in first_error.get("loc", []))
            msg = first_error.get("msg", str(error))
            if loc:
                return f"Profile validation failed: {loc}: {msg}"
            return f"Profile validation failed: {msg}"

    return f"Profile validation failed: {error}"
