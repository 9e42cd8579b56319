"""
Pytest configuration for sollint tests.
"""
import sys
import os

import pytest

# Make `import sollint` work from a source checkout without installing
_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
_SRC_DIR = os.path.join(_ROOT, 'src')

if _SRC_DIR not in sys.path:
	sys.path.insert(0, _SRC_DIR)

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), 'fixtures')


@pytest.fixture
def fixtures_dir():
	return FIXTURES_DIR


@pytest.fixture
def parse():
	"""Parse Solidity text, failing the test on parser errors."""
	from sollint.parser.parser import parse_source

	def _parse(source):
		unit, errors = parse_source(source, "test.sol")
		assert errors == [], errors
		return unit

	return _parse
