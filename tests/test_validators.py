"""
Tests for input validation utilities.
"""

from utils.validators import validate_email, validate_phone, validate_room_number


class TestValidateEmail:
    """Tests for email validation."""

    def test_valid_email(self):
        """Test valid email formats."""
        assert validate_email('user@example.com') is True
        assert validate_email('user.name@example.com') is True
        assert validate_email('user+tag@example.com.br') is True

    def test_invalid_email(self):
        """Test invalid email formats."""
        assert validate_email('') is False
        assert validate_email(None) is False
        assert validate_email('invalid') is False
        assert validate_email('missing@domain') is False
        assert validate_email('@nodomain.com') is False
        assert validate_email('spaces in@email.com') is False


class TestValidatePhone:
    """Tests for Brazilian phone validation."""

    def test_valid_phones(self):
        """Test mobile and landline numbers with and without country code."""
        assert validate_phone('+5511987654321') is True
        assert validate_phone('5511987654321') is True
        assert validate_phone('11987654321') is True
        assert validate_phone('1132654321') is True

    def test_valid_phones_with_separators(self):
        """Test phones with spaces and separators."""
        assert validate_phone('+55 (11) 98765-4321') is True
        assert validate_phone('(11) 3265-4321') is True

    def test_invalid_phones(self):
        """Test invalid phone formats."""
        assert validate_phone('') is False
        assert validate_phone(None) is False
        assert validate_phone('98765-4321') is False  # Missing area code
        assert validate_phone('0119876543') is False  # Area code cannot start with 0
        assert validate_phone('abcdefghijk') is False


class TestValidateRoomNumber:
    """Tests for room number validation."""

    def test_valid(self):
        assert validate_room_number('101') is True
        assert validate_room_number('ch01') is True

    def test_invalid(self):
        assert validate_room_number('') is False
        assert validate_room_number('10 1') is False
        assert validate_room_number('A' * 11) is False
