#!/usr/bin/env python3
# svn CLI client, used by the connector for all repository access

# Import svn_connector modules
from svn_connector.svn.entry import DirEntry, NodeKind, parse_svn_date
from svn_connector.utils import cmd, secret
from svn_connector.utils.context import Context

# Import Python standard modules
from typing import BinaryIO, List, Optional
import io
import os
import xml.etree.ElementTree as ElementTree

HEAD = "HEAD"

# svn error codes which mean the URL doesn't exist at the requested revision
# W170000: URL non-existent in revision
# E170000: generic ra error, also returned for missing paths over http
# E200009: could not display info for all targets because some targets don't exist
NOT_FOUND_ERROR_CODES = ("W170000", "E170000", "E200009")


class SvnClientError(Exception):
    """Raised when an svn command exits with a non-zero return code"""

    def __init__(self, command_name: str, return_code: Optional[int], stderr: List[str]):
        self.command_name = command_name
        self.return_code = return_code
        self.stderr = stderr
        super().__init__(f"svn {command_name} failed with return code {return_code}: {' '.join(stderr)}")

    def is_not_found(self) -> bool:
        return any(code in line for line in self.stderr for code in NOT_FOUND_ERROR_CODES)


class SvnClient:
    """
    Thin wrapper around the svn command line client

    Every method runs one svn command, synchronously, and raises SvnClientError if it fails

    The credentials are shared by every thread using this client;
    set_credentials() from one thread is visible to the next command run from any thread
    """

    def __init__(self, ctx: Context):

        self.ctx = ctx
        self.svn_binary = ctx.get_env_var("SVN_BINARY", "svn")
        self.disable_tls_verification = ctx.get_env_var("SVN_CONNECTOR_DISABLE_TLS_VERIFICATION", False)
        self.username = None
        self.password = None


    ## Credentials

    def set_username(self, username: Optional[str]) -> None:
        self.username = username

    def set_password(self, password: Optional[str]) -> None:
        self.password = password
        if password:
            secret.add(self.ctx, password)

    def set_credentials(self, username: Optional[str], password: Optional[str]) -> None:
        self.set_username(username)
        self.set_password(password)


    ## Remote read commands

    def list(self, url: str, revision: str = HEAD, recurse: bool = False) -> List[DirEntry]:
        """List the entries of the directory at url; entry paths are relative to url"""

        args = ["list", "--xml", "--revision", revision]
        if recurse:
            args += ["--depth", "infinity"]
        args += [url]

        output = self._run("list", args)["output"]
        root = _parse_xml(output)

        return [_parse_entry(entry, entry.findtext("name")) for entry in root.iter("entry")]


    def get_dir_entry(self, url: str, revision: str = HEAD) -> Optional[DirEntry]:
        """Get the entry at url, or None if nothing exists at url in this revision"""

        try:
            output = self._run("info", ["info", "--xml", "--revision", revision, url], quiet=True)["output"]
        except SvnClientError as exception:
            if exception.is_not_found():
                return None
            raise

        entry = _parse_xml(output).find("entry")
        if entry is None:
            return None

        return _parse_entry(entry, entry.get("path"))


    def get_content(self, url: str, revision: str = HEAD) -> BinaryIO:
        """Fetch the bytes of the file at url, as an in-memory stream"""

        output = self._run("cat", ["cat", "--revision", revision, url], text=False)["output"]

        return io.BytesIO(output)


    ## Working copy commands

    def checkout(self, url: str, target_path, revision: str = HEAD, recurse: bool = False) -> None:
        """
        Check out url into target_path

        recurse=False only checks out the files directly in url, which is all the connector needs to add or change one entry
        """

        depth = "infinity" if recurse else "files"

        self._run("checkout", ["checkout", "--depth", depth, "--revision", revision, url, os.fspath(target_path)])


    def add_file(self, path) -> None:
        """Schedule a new file for addition on the next commit"""

        self._run("add", ["add", "--depth", "empty", os.fspath(path)])


    def add_directory(self, path, recurse: bool = True) -> None:
        """Schedule a new directory for addition on the next commit, with its contents if recurse"""

        depth = "infinity" if recurse else "empty"

        self._run("add", ["add", "--depth", depth, os.fspath(path)])


    def commit(self, paths: List, message: str, recurse: bool = True) -> None:
        """Commit the changes in each of the working copy paths, including scheduled additions"""

        depth = "infinity" if recurse else "empty"

        self._run("commit", ["commit", "--depth", depth, "--message", message] + [os.fspath(path) for path in paths])


    ## Remote write commands

    def remove(self, urls: List[str], message: str) -> None:
        """Delete urls from the repository, in one commit"""

        self._run("delete", ["delete", "--message", message] + list(urls))


    ## Command execution

    def _build_command(self, args: List[str], password: Optional[str]) -> List[str]:
        """
        Prepend the svn binary and the common args,
        and add authentication, if provided
        """

        command = [self.svn_binary] + args + ["--non-interactive"]

        # Skip TLS verification, if needed
        if self.disable_tls_verification:
            command += ["--trust-server-cert-failures=unknown-ca,cn-mismatch,expired,not-yet-valid,other"]

        if self.username:
            command += ["--username", self.username]

        # The password is fed into stdin by run_subprocess, to keep it out of the process list
        if password:
            command += ["--password-from-stdin"]

        return command


    def _run(self, command_name: str, args: List[str], quiet: bool = False, text: bool = True) -> dict:

        # Read the password once, so the command and its stdin agree, even if login() is called from another thread
        password = self.password
        command = self._build_command(args, password)

        result = cmd.run_subprocess(self.ctx, command, password=password, quiet=quiet, name=f"svn_{command_name}", text=text)

        if not result["success"]:
            raise SvnClientError(command_name, result["return_code"], result["stderr"])

        return result


def _parse_xml(output) -> ElementTree.Element:
    """Parse svn's --xml output, given as a list of lines"""

    try:
        return ElementTree.fromstring("\n".join(output))
    except ElementTree.ParseError as exception:
        raise SvnClientError("xml", None, [f"Could not parse svn xml output: {exception}"]) from exception


def _parse_entry(entry: ElementTree.Element, path: Optional[str]) -> DirEntry:
    """Build a DirEntry from an <entry> element of svn list --xml or svn info --xml"""

    commit = entry.find("commit")

    last_changed_date = None
    last_changed_revision = None

    if commit is not None:

        last_changed_date = parse_svn_date(commit.findtext("date"))

        if commit.get("revision", "").isdigit():
            last_changed_revision = int(commit.get("revision"))

    size = entry.findtext("size")

    return DirEntry(
        path                    = path or "",
        kind                    = NodeKind.from_svn(entry.get("kind")),
        last_changed_date       = last_changed_date,
        last_changed_revision   = last_changed_revision,
        size                    = int(size) if size and size.isdigit() else None,
    )
