"""Profile package: models, predicates, substitutions and loading."""

from mkvbatch.policy.conversion import AudioCodec, AudioConversionParams
from mkvbatch.policy.exceptions import (
    ConversionParamsError,
    ProfileError,
    ProfileValidationError,
)
from mkvbatch.policy.loader import load_profile, load_profile_from_dict
from mkvbatch.policy.predicates import (
    IndexPredicate,
    LanguagePredicate,
    NonePredicate,
    TitleCombinator,
    TitlePredicate,
    TitleRule,
    TitleRuleKind,
    TrackPredicate,
    is_match,
)
from mkvbatch.policy.substitutions import Substitutions
from mkvbatch.policy.types import (
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

__all__ = [
    "AttachmentParams",
    "AudioCodec",
    "AudioConversionParams",
    "ChapterParams",
    "ConversionParamsError",
    "HookCommand",
    "IndexPredicate",
    "LanguagePredicate",
    "MiscParams",
    "NonePredicate",
    "OnErrorMode",
    "OtherTracksParams",
    "PadType",
    "ProcessingParams",
    "Profile",
    "ProfileError",
    "ProfileValidationError",
    "Substitutions",
    "TitleCombinator",
    "TitlePredicate",
    "TitleRule",
    "TitleRuleKind",
    "TrackParams",
    "TrackPolicy",
    "TrackPredicate",
    "is_match",
    "load_profile",
    "load_profile_from_dict",
]
