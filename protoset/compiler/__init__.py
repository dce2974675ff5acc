"""Running the external schema compiler: toolchain checks, execution, builders."""

from protoset.compiler.builder import Compiler, run_compile
from protoset.compiler.executor import ExecutionResult, run
from protoset.compiler.toolchain import Toolset, check_toolchain, lookup

__all__ = [
    "Compiler",
    "ExecutionResult",
    "Toolset",
    "check_toolchain",
    "lookup",
    "run",
    "run_compile",
]
