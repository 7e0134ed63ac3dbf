"""bazelws - on-disk Bazel workspace fixtures for integration tests.

Renders WORKSPACE, BUILD.bazel and source files into a temporary directory
tree so a test can drive a real build tool against a realistic layout.
Fresh workspaces are written in create mode; existing ones can be mutated
between test phases in modify mode.

Package entry point. Exports the version string only; import the writer
API from bazelws.workspace.writer.
"""

__version__ = "0.1.0"
