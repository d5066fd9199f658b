"""
revc Command-Line Interface
===========================

- **revparse**: parse revc programs and print their syntax trees and
  diagnostics

The tool is a Click application with the shared exit codes from
revc.cli.errors.
"""

__all__ = ["revparse"]
