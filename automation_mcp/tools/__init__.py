from .filesystem import (
	filter_suffixes,
	list_names,
	read_text,
	walk_files,
)
from .process import CommandError, CommandResult, CommandRunner

__all__ = [
	"CommandError",
	"CommandResult",
	"CommandRunner",
	"filter_suffixes",
	"list_names",
	"read_text",
	"walk_files",
]
