#!/usr/bin/env python3
# Connector to browse, read, and change a tree of files in a Subversion repository

# Reads go straight to the repository
# Writes check out the parent folder into a fresh working copy, change it, commit it, and delete the working copy
# Only one checkout / change / commit sequence runs at a time per connector instance

# Import svn_connector modules
from svn_connector.config.temporary_file_store import resolve_temporary_file_store
from svn_connector.connector.base import Connector, secured, threadsafe
from svn_connector.connector.configuration import CONFIG_KEY_REPOSITORY_PATH, CONFIG_KEY_TEMPORARY_FILE_STORE, ConnectorConfiguration
from svn_connector.connector.node import ConnectorNode, ConnectorNodeType, ContentInformation
from svn_connector.exceptions import ConfigurationError, ConnectorError
from svn_connector.svn.client import HEAD, SvnClient
from svn_connector.svn.entry import DirEntry, NodeKind
from svn_connector.utils import fs
from svn_connector.utils.context import Context
from svn_connector.utils.log import log
from svn_connector.utils.transaction_lock import TransactionLock

# Import Python standard modules
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional
import uuid

SLASH = "/"

# Appended to every commit message, so operators can find the connector's commits in svn log
COMMIT_MESSAGE_MARKER = "using svn-connector"


def node_type_for(kind: NodeKind, name: str) -> ConnectorNodeType:
    """
    Infer a node's type from its svn kind and file name

    Anything svn doesn't report as a file is a folder; files are typed by their extension
    """

    if kind != NodeKind.FILE:
        return ConnectorNodeType.FOLDER

    name = name or ""

    if name.endswith(".xml") or name.endswith(".bpmn"):
        return ConnectorNodeType.BPMN_FILE

    if name.endswith(".png"):
        return ConnectorNodeType.PNG_FILE

    return ConnectorNodeType.ANY_FILE


def parent_of(id: str) -> str:
    """
    Get the id of a node's parent folder, ex. /procs/order.bpmn -> /procs

    Returns "" for top level nodes, which the address translation maps to the repository root
    """

    if SLASH not in id:
        return ""

    return id[:id.rfind(SLASH)]


def join_id(parent_id: str, name: str) -> str:
    """Join a parent id and a child name, with exactly one slash between them"""

    if not parent_id.endswith(SLASH):
        parent_id += SLASH

    return parent_id + name.lstrip(SLASH)


class SvnConnector(Connector):
    """
    Connector for a folder of an svn repository, configured by the repositoryPath property

    Read operations are safe to call from many threads at once
    Write operations (create_node, update_content) are serialized by a reentrant lock, without a timeout
    delete_node is a single svn delete against the repository URL, and does not take the lock

    If a create_node or update_content call fails, its working copy is left on disk, and its path is logged
    """

    def __init__(self, ctx: Context, svn_client: Optional[SvnClient] = None):

        super().__init__()

        self.ctx = ctx

        # One client per connector, shared by all threads; credentials set by login() apply to every thread
        self.svn_client = svn_client or SvnClient(ctx)

        self.base_temporary_file_store = None
        self.base_url = None

        self.transaction_lock = TransactionLock()


    def init(self, configuration: ConnectorConfiguration) -> None:

        self.set_configuration(configuration)

        self.base_temporary_file_store = resolve_temporary_file_store(
            self.ctx,
            configuration.get_property(CONFIG_KEY_TEMPORARY_FILE_STORE)
        )

        self.base_url = configuration.get_property(CONFIG_KEY_REPOSITORY_PATH)

        self._log(f"Initialized svn connector for {self.base_url}", "info", "init", structured_data={"temporary_file_store": self.base_temporary_file_store})


    @threadsafe
    def login(self, username: str, password: str) -> None:

        self.svn_client.set_credentials(username, password)


    ## Address translation

    def to_address(self, id: str) -> str:
        """
        Translate a node id into the URL of the node in the svn repository,
        with exactly one slash between the repository path and the id
        """

        if not self.base_url:

            label = self.configuration.label if self.configuration else None
            raise ConfigurationError(
                f"SVN connector '{label}' has no {CONFIG_KEY_REPOSITORY_PATH} configured",
                operation="to_address",
                node_id=id
            )

        id = id or ""

        if self.base_url.endswith(SLASH) and id.startswith(SLASH):
            id = id[1:]
        elif not self.base_url.endswith(SLASH) and not id.startswith(SLASH):
            id = SLASH + id

        result = self.base_url + id

        if result.endswith(SLASH + SLASH):
            result = result[:-1]

        return result


    ## Node materialization

    def materialize(self, parent_id: str, entry: DirEntry) -> ConnectorNode:
        """Build the node for an entry of the parent's svn directory listing"""

        node = ConnectorNode(join_id(parent_id, entry.path))

        return self._decorate_node(node, entry)


    def _decorate_node(self, node: ConnectorNode, entry: DirEntry) -> ConnectorNode:

        node.label = entry.path
        node.last_modified = entry.last_changed_date
        node.connector_id = self.configuration.id if self.configuration else None
        node.type = node_type_for(entry.kind, entry.path)

        return node


    ## Read operations

    @secured
    def get_root(self) -> ConnectorNode:

        return ConnectorNode(SLASH, SLASH, ConnectorNodeType.FOLDER, connector_id=self._connector_id())


    @threadsafe
    @secured
    def get_children(self, parent: ConnectorNode) -> List[ConnectorNode]:

        try:

            svn_url = self.to_address(parent.id)
            entries = self.svn_client.list(svn_url, HEAD)

            return [self.materialize(parent.id, entry) for entry in entries]

        except ConfigurationError:
            raise

        except Exception as exception:

            self._log(f"Cannot get children for node {parent.id}", "debug", "get_children", parent.id, exception)

            label = self.configuration.label if self.configuration else None
            raise ConnectorError(
                f"Children for SVN connector '{label}' could not be loaded in repository '{parent.id}'.",
                operation="get_children",
                node_id=parent.id
            ) from exception


    @threadsafe
    @secured
    def get_node(self, id: str) -> Optional[ConnectorNode]:
        """Get the node at id, or None if there is nothing at id, or it can't be read"""

        try:

            svn_url = self.to_address(id)
            entry = self.svn_client.get_dir_entry(svn_url, HEAD)

        except ConfigurationError:
            raise

        except Exception as exception:
            self._log(f"Cannot get node '{id}'", "debug", "get_node", id, exception)
            return None

        if entry is None:
            return None

        return self._decorate_node(ConnectorNode(id), entry)


    @threadsafe
    @secured
    def get_content(self, node: ConnectorNode) -> Optional[BinaryIO]:
        """
        Get the content of a node, as a binary stream

        PNG renderings may not have been created yet, so a PNG node without content returns None;
        any other node without content raises ConnectorError
        """

        content_path = self._content_path(node)

        try:

            return self.svn_client.get_content(self.to_address(content_path), HEAD)

        except ConfigurationError:
            raise

        except Exception as exception:

            if node.type == ConnectorNodeType.PNG_FILE:
                self._log(f"No rendered image found at '{content_path}'", "debug", "get_content", node.id, exception)
                return None

            self._log(f"Cannot get content of node '{node.id}'", "debug", "get_content", node.id, exception)

            raise ConnectorError(
                f"Content of node '{node.id}' could not be loaded.",
                operation="get_content",
                node_id=node.id
            ) from exception


    def _content_path(self, node: ConnectorNode) -> str:
        """
        The path of the file holding a node's content

        A PNG node's id can name the diagram it's rendered from, ex. /procs/order.bpmn,
        so its extension is replaced, ex. /procs/order.png
        """

        path = node.id

        if node.type != ConnectorNodeType.PNG_FILE:
            return path

        # Only replace an extension on the last path segment
        point_index = path.rfind(".")
        if point_index > path.rfind(SLASH):
            path = path[:point_index]

        return path + ".png"


    @threadsafe
    @secured
    def get_content_information(self, node: ConnectorNode) -> ContentInformation:
        """Reload the node from the repository, to get its current state, rather than trusting the node passed in"""

        try:
            reloaded_node = self.get_node(node.id)

        except ConfigurationError:
            raise

        except Exception:
            return ContentInformation.not_found()

        if reloaded_node is None:
            return ContentInformation.not_found()

        if reloaded_node.type == ConnectorNodeType.FOLDER:
            raise ValueError("Can only get content information from files")

        return ContentInformation(True, reloaded_node.last_modified)


    ## Write operations

    @threadsafe
    @secured
    def create_node(self, parent_id: str, id: str, label: str, type: ConnectorNodeType) -> ConnectorNode:
        """Create an empty file, or a folder, named label, in the folder containing id"""

        if type is None or type == ConnectorNodeType.UNSPECIFIED:
            raise ValueError("Must specify a valid node type")

        parent_folder = parent_of(id)

        def add_node(working_copy: Path) -> None:

            new_path = working_copy / label

            if type == ConnectorNodeType.FOLDER:
                new_path.mkdir()
                self.svn_client.add_directory(new_path, True)
            else:
                new_path.touch(exist_ok=False)
                self.svn_client.add_file(new_path)

        self._run_mutation(
            "create_node",
            id,
            add_node,
            f"Created node '{label}' in '{parent_folder}' {COMMIT_MESSAGE_MARKER}."
        )

        return ConnectorNode(id, label, type, connector_id=self._connector_id())


    @threadsafe
    @secured
    def update_content(self, node: ConnectorNode, new_content: BinaryIO) -> ContentInformation:
        """Replace the content of a file node with the bytes of new_content"""

        parent_folder = parent_of(node.id)

        def write_content(working_copy: Path) -> ContentInformation:

            file_path = working_copy / node.label
            fs.copy_stream(new_content, file_path)

            return ContentInformation(True, datetime.fromtimestamp(file_path.stat().st_mtime, tz=timezone.utc))

        return self._run_mutation(
            "update_content",
            node.id,
            write_content,
            f"Updated file '{node.label}' in '{parent_folder}' {COMMIT_MESSAGE_MARKER}."
        )


    @threadsafe
    @secured
    def delete_node(self, node: ConnectorNode) -> None:
        """
        Delete a node with a single svn delete of its URL

        Doesn't use a working copy, so doesn't take the transaction lock;
        a delete can run while another thread's create_node or update_content is between checkout and commit
        """

        id = node.id

        try:

            svn_url = self.to_address(id)
            self.svn_client.remove([svn_url], f"Removed '{id}' {COMMIT_MESSAGE_MARKER}.")

        except ConfigurationError:
            raise

        except Exception as exception:

            self._log(f"Error while deleting node '{id}'", "debug", "delete_node", id, exception)

            raise ConnectorError(
                f"Node '{id}' could not be deleted.",
                operation="delete_node",
                node_id=id
            ) from exception


    ## Mutation workflow

    def _run_mutation(
            self,
            operation: str,
            id: str,
            change_working_copy: Callable[[Path], object],
            commit_message: str,
        ):
        """
        Check out the parent folder of id into a new working copy,
        call change_working_copy(working_copy), commit the working copy, then delete it

        Returns whatever change_working_copy returns

        The transaction lock is held from before the checkout until after the commit, and is always released
        The working copy is only deleted if the commit succeeded
        """

        parent_folder = parent_of(id)
        working_copy = None

        try:

            self._begin_transaction()

            try:

                svn_url = self.to_address(parent_folder)
                working_copy = self._new_working_copy_path()

                self._checkout(svn_url, working_copy, operation, id)

                result = change_working_copy(working_copy)

                self._commit([working_copy], commit_message, operation, id)

            finally:
                self._stop_transaction()

        except ConfigurationError:
            raise

        except Exception as exception:

            self._log(f"Error while running {operation} for '{id}' in '{parent_folder}'", "debug", operation, id, exception)

            if working_copy is not None and working_copy.exists():
                self._log(f"Working copy left behind by failed {operation}: {working_copy}", "warning", operation, id)

            if isinstance(exception, ConnectorError):
                raise

            raise ConnectorError(
                f"{operation} failed for node '{id}'.",
                operation=operation,
                node_id=id
            ) from exception

        if not fs.delete_recursively(working_copy):
            self._log(f"Could not completely delete working copy {working_copy}", "warning", operation, id)

        return result


    def _begin_transaction(self) -> None:
        self.transaction_lock.acquire()


    def _stop_transaction(self) -> None:
        """Release the lock if this thread holds it; never raises"""
        self.transaction_lock.release_all()


    def _new_working_copy_path(self) -> Path:

        base = Path(self.base_temporary_file_store)
        base.mkdir(parents=True, exist_ok=True)

        return base / str(uuid.uuid4())


    def _checkout(self, svn_url: str, target: Path, operation: str, id: str) -> None:

        try:
            self.svn_client.checkout(svn_url, target, HEAD, False)

        except Exception as exception:

            self._log(f"Could not checkout from svn repository '{svn_url}' to the following destination '{target}'", "error", operation, id, exception)

            raise ConnectorError(
                f"Could not checkout '{svn_url}'.",
                operation=operation,
                node_id=id
            ) from exception


    def _commit(self, sources: List[Path], message: str, operation: str, id: str) -> None:

        try:
            self.svn_client.commit(sources, message, True)

        except Exception as exception:

            self._log(f"Could not commit changes in '{sources[0]}'", "error", operation, id, exception)

            raise ConnectorError(
                f"Could not commit changes for node '{id}'.",
                operation=operation,
                node_id=id
            ) from exception


    ## Logging

    def _connector_id(self):
        return self.configuration.id if self.configuration else None


    def _log(
            self,
            message: str,
            level_name: str,
            operation: str,
            node_id: str = None,
            exception: BaseException = None,
            structured_data: dict = None,
        ) -> None:

        payload = {
            "connector": {
                "id": self._connector_id(),
                "label": self.configuration.label if self.configuration else None,
                "repository_path": self.base_url,
            },
            "operation": operation,
            "node": {"id": node_id},
        }

        if structured_data:
            payload.update(structured_data)

        log(self.ctx, message, level_name, payload, exception=exception)
