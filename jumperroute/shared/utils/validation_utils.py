"""Validation utilities for jumperroute."""
from typing import Any

from ..exceptions import ValidationError


def validate_positive_number(value: Any, field_name: str) -> None:
    """Validate that a value is a positive number.
    
    Args:
        value: Value to validate
        field_name: Name of field for error reporting
        
    Raises:
        ValidationError: If value is not a positive number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{field_name} must be numeric, got {type(value)}",
            field=field_name, value=value
        )
    
    if value <= 0:
        raise ValidationError(
            f"{field_name} must be positive, got {value}",
            field=field_name, value=value
        )


def validate_non_negative_number(value: Any, field_name: str) -> None:
    """Validate that a value is a non-negative number.
    
    Args:
        value: Value to validate
        field_name: Name of field for error reporting
        
    Raises:
        ValidationError: If value is not non-negative
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{field_name} must be numeric, got {type(value)}",
            field=field_name, value=value
        )
    
    if value < 0:
        raise ValidationError(
            f"{field_name} must be non-negative, got {value}",
            field=field_name, value=value
        )


def validate_range(value: Any, field_name: str, min_val: float, max_val: float) -> None:
    """Validate that a value is within a specified range.
    
    Args:
        value: Value to validate
        field_name: Name of field for error reporting
        min_val: Minimum allowed value
        max_val: Maximum allowed value
        
    Raises:
        ValidationError: If value is not in range
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{field_name} must be numeric, got {type(value)}",
            field=field_name, value=value
        )
    
    if value < min_val or value > max_val:
        raise ValidationError(
            f"{field_name} must be between {min_val} and {max_val}, got {value}",
            field=field_name, value=value
        )


def validate_connection_name(connection_name: Any) -> None:
    """Validate a connection (net) name.
    
    Raises:
        ValidationError: If the name is not a non-empty string
    """
    if not isinstance(connection_name, str):
        raise ValidationError(
            f"Connection name must be string, got {type(connection_name)}",
            field="connection_name", value=connection_name
        )
    
    if not connection_name.strip():
        raise ValidationError("Connection name cannot be empty",
                              field="connection_name", value=connection_name)
