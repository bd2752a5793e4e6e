"""Test configuration and fixtures for formatting tests."""

import pytest

from scpfmt.formatting import LineFormatter, load_keyword_table


ITEM_SCRIPT = '''[itemdef i_sword]
defname=i_sword_long
name=long sword
type=t_weapon_sword
// on=@create keep me
on=@create
  tag.owner=<src.uid>
  color=0481
on=@dclick
  if (<src.isgm>)
    say "hello"
    emote looks around
  else
    sysmessage You cannot use this.
  endif
  return 1
'''

ITEM_SCRIPT_FORMATTED = '''[ITEMDEF i_sword]
DEFNAME=i_sword_long
NAME=long sword
TYPE=t_weapon_sword
// on=@create keep me
ON=@CREATE
  TAG.owner=<src.uid>
  COLOR=0481
ON=@DCLICK
  IF (<src.isgm>)
    SAY "hello"
    EMOTE looks around
  ELSE
    SYSMESSAGE You cannot use this.
  ENDIF
  RETURN 1
'''


@pytest.fixture(scope="session")
def keyword_table():
    """Bundled keyword table."""
    return load_keyword_table()


@pytest.fixture
def formatter(keyword_table):
    """Formatter using the bundled keyword table."""
    return LineFormatter(keyword_table)


@pytest.fixture
def item_script():
    return ITEM_SCRIPT


@pytest.fixture
def item_script_formatted():
    return ITEM_SCRIPT_FORMATTED
