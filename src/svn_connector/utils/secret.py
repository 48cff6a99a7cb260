#!/usr/bin/env python3
# Secrets handling

# Do not import the log module here; log imports this module

# Import svn_connector modules
from svn_connector.utils.context import Context


REDACTED = "REDACTED_SECRET"


def add(ctx: Context, secret) -> None:
    """Add a secret to the set of secrets, as a string"""

    ctx.add_secrets(secret)


def redact(ctx: Context, input):
    """Redact secrets from an input."""

    # Handle different types
    # Return the same type this function was given
    # If input is a dict, list, or tuple, uses recursion to depth-first-search through the values, with arbitrary depths, keys, and value types

    secrets_set = set(ctx.secrets)

    # Nothing to redact, or nothing which could contain a secret
    if (
        input is None or
        isinstance(input, bool) or
        len(secrets_set) == 0
    ):
        return input

    # If it's type string, just use string's built-in .replace()
    if isinstance(input, str):

        redacted_input = input

        # Replace the longest secrets first, in case one secret is a substring of another
        for secret in sorted(secrets_set, key=len, reverse=True):
            redacted_input = redacted_input.replace(secret, REDACTED)

        return redacted_input

    # Need to iterate through the items in the list or tuple
    if isinstance(input, (list, tuple)):

        redacted_input = [redact(ctx, item) for item in input]

        return type(input)(redacted_input) if isinstance(input, tuple) else redacted_input

    # If it's a dict, recurse through the dict, until it gets down to primitive types
    if isinstance(input, dict):

        redacted_input = {}

        for key, value in input.items():

            # Check if the secret is in the key, only string keys could hold one
            redacted_key = redact(ctx, key) if isinstance(key, str) else key

            # Send the value back through this function to hit any of the non-container types
            redacted_input[redacted_key] = redact(ctx, value)

        return redacted_input

    # Other types, ex. ints, datetimes, exceptions, are logged via their str() representation,
    # so only convert them if the representation contains a secret
    input_string = str(input)
    if any(secret in input_string for secret in secrets_set):
        return redact(ctx, input_string)

    return input
