# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
lmcc compile pipeline and CLI. The CLI entrypoint is `lmcc.driver.lmcc:main`.
"""

from .lmcc import CompileResult, compile_file, compile_source, main

__all__ = ["CompileResult", "compile_file", "compile_source", "main"]
