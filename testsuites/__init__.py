"""
Test suites package.

Kept importable so that:
  - IDEs resolve `testsuites.ui_testing...` imports
  - `run_tests.py` and CI jobs can address suites by module path
  - unit tests import the framework the same way browser tests do
"""

