import unittest

from hamcrest import assert_that, calling, contains_exactly, has_length, is_, raises

from acn.commands import COMMAND_NAMES, DEFAULT_COMMANDS, CommandTable
from acn.errors import ValidationError


class CommandTableTest(unittest.TestCase):

    def test_ids_are_positions(self):
        assert_that(DEFAULT_COMMANDS.id_of('reset'), is_(1))
        assert_that(DEFAULT_COMMANDS.id_of('pair'), is_(4))
        assert_that(DEFAULT_COMMANDS.id_of('clear'), is_(5))
        assert_that(DEFAULT_COMMANDS.id_of('scan'), is_(10))
        assert_that(DEFAULT_COMMANDS.id_of('ping'), is_(11))

    def test_unknown_command(self):
        assert_that(calling(DEFAULT_COMMANDS.id_of).with_args('selfdestruct'),
                    raises(ValidationError, "Unknown command 'selfdestruct'"))

    def test_reserved_name_is_not_a_command(self):
        assert_that(calling(DEFAULT_COMMANDS.id_of).with_args(''), raises(ValidationError))
        assert_that('' in DEFAULT_COMMANDS, is_(False))

    def test_unhashable_name(self):
        assert_that(calling(DEFAULT_COMMANDS.id_of).with_args(['reset']), raises(ValidationError))

    def test_names(self):
        assert_that(DEFAULT_COMMANDS, has_length(len(COMMAND_NAMES) - 1))
        assert_that(DEFAULT_COMMANDS.names[:3], contains_exactly('reset', 'save', 'restore'))

    def test_name_of(self):
        assert_that(DEFAULT_COMMANDS.name_of(10), is_('scan'))
        assert_that(calling(DEFAULT_COMMANDS.name_of).with_args(0), raises(ValidationError))
        assert_that(calling(DEFAULT_COMMANDS.name_of).with_args(99), raises(ValidationError))

    def test_table_cannot_be_modified(self):
        sut = CommandTable(['', 'one'])

        def modify():
            sut._ids['two'] = 2

        assert_that(calling(modify), raises(TypeError))
