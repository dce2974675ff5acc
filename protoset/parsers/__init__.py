"""Lexical scanners that extract import declarations from schema files."""

from protoset.parsers.proto_scanner import ProtoScanner, scan_source

__all__ = ["ProtoScanner", "scan_source"]
