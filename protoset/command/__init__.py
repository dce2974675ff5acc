"""Search-root deduplication and compiler argument assembly."""

from protoset.command.assembler import assemble_command
from protoset.command.plugins import PluginSpec, lookup_plugin
from protoset.command.roots import SearchRootSet, dedupe_roots

__all__ = ["PluginSpec", "SearchRootSet", "assemble_command", "dedupe_roots", "lookup_plugin"]
