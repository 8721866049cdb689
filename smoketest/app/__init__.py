"""Run configuration: options, target resolution, sandbox staging and launch options."""

from .options import RunOptions, parse_args, parse_known_args
from .target import Quality, ResolvedTarget, TargetKind, classify_quality, resolve_target
from .environment import Sandbox, WorkspacePaths
from .launch import LaunchConfiguration, create_options
