#!/usr/bin/env python3
# Context class for managing application state across modules

# Note: The log module imports this module
# Do not import the log module; it'd create a circular import

# Import Python standard modules
from datetime import datetime
import os
import socket
import threading
import time

# Import third party modules
import psutil


class Context:
    """
    State shared by a connector and everything it calls, ex. env vars and the secrets to redact

    A single Context may be shared by many connector instances and caller threads,
    so anything stored on it must be safe to read concurrently
    """

    ### Class attributes

    # Attributes we'd like to log for each svn process
    psutils_process_attributes_to_fetch = [
        'cmdline',
        'cpu_percent',
        'create_time', # Seconds since Epoch
        'memory_percent',
        'num_threads',
        'pid',
        'ppid',
        'status',
    ]


    def __init__(self, env_vars: dict):
        """
        Initialize the context with environment variables and default state.

        Args:
            env_vars: dict of environment variables from the config.load_env.load_env_vars() function
        """

        # Store environment variables from context initialization call
        self.env_vars = env_vars

        # Set of secrets to redact in logs
        # Per-instance, so that one test or embedding application's secrets don't leak into another's
        self.secrets = set()
        self.secrets_lock = threading.Lock()

        # Host metadata
        self.hostname = socket.gethostname()
        self.pid = os.getpid()
        self.start_datetime = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.start_timestamp = time.time()

        # Get the list of proc attributes from the psutils library, and initialize psutils_process_attributes_to_fetch
        self.initialize_process_attributes_to_fetch()


    def add_secrets(self, new_secrets) -> None:
        """
        Register values to redact from every log event

        Args:
            new_secrets: one value, or a set, list, or tuple of values; empty values are ignored
        """

        with self.secrets_lock:

            if isinstance(new_secrets, (set, frozenset, list, tuple)):
                self.secrets.update(str(secret) for secret in new_secrets if secret)
            elif new_secrets:
                self.secrets.add(str(new_secrets))


    def get_env_var(self, key, default=None):
        """
        Read a value loaded by load_env_vars(), or default if it wasn't loaded
        """
        return self.env_vars.get(key, default)


    def initialize_process_attributes_to_fetch(self) -> None:
        """
        Keep only the attributes the installed psutil version can report for a process
        """

        psutil_attributes = psutil.Process().as_dict().keys()

        self.psutils_process_attributes_to_fetch = [
            attribute for attribute in self.psutils_process_attributes_to_fetch
            if attribute in psutil_attributes
        ]
