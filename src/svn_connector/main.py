#!/usr/bin/env python3
# Command line entry point, to browse and change a connector's tree by hand

# Import svn_connector modules
from svn_connector.config import connectors, load_env, validate_env
from svn_connector.connector.node import ConnectorNode, ConnectorNodeType
from svn_connector.connector.svn_connector import SvnConnector, join_id, node_type_for, parent_of
from svn_connector.exceptions import ConnectorError
from svn_connector.svn.entry import NodeKind
from svn_connector.utils import logger
from svn_connector.utils.context import Context
from svn_connector.utils.log import log

# Import Python standard modules
import argparse
import json
import shutil
import sys


def build_parser() -> argparse.ArgumentParser:

    parser = argparse.ArgumentParser(prog="svn-connector", description="Browse and change a tree of files in an svn repository")
    parser.add_argument("--config", help="YAML file of connector configurations, defaults to SVN_CONNECTOR_CONFIG")
    parser.add_argument("--connector", help="Connector id from the configuration file, defaults to the first one")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("ls", help="List the children of a folder").add_argument("id", nargs="?", default="/")
    subparsers.add_parser("stat", help="Show a node and its content information").add_argument("id")
    subparsers.add_parser("cat", help="Write a file's content to stdout").add_argument("id")

    mkdir_parser = subparsers.add_parser("mkdir", help="Create a folder")
    mkdir_parser.add_argument("parent_id")
    mkdir_parser.add_argument("name")

    touch_parser = subparsers.add_parser("touch", help="Create an empty file")
    touch_parser.add_argument("parent_id")
    touch_parser.add_argument("name")

    put_parser = subparsers.add_parser("put", help="Replace a file's content with a local file")
    put_parser.add_argument("id")
    put_parser.add_argument("file")

    subparsers.add_parser("rm", help="Delete a node").add_argument("id")

    return parser


def build_connector(ctx: Context, config_path: str, connector_id: str = None) -> SvnConnector:
    """Load the connector configuration, and initialize and log in an SvnConnector"""

    configurations = connectors.load_from_file(ctx, config_path)

    if not configurations:
        raise ConnectorError(f"No connectors configured in {config_path}")

    if connector_id:
        if connector_id not in configurations:
            raise ConnectorError(f"Connector {connector_id} not found in {config_path}")
        configuration = configurations[connector_id]
    else:
        configuration = next(iter(configurations.values()))

    connector = SvnConnector(ctx)
    connector.init(configuration)

    if ctx.env_vars["SVN_USERNAME"]:
        connector.login(ctx.env_vars["SVN_USERNAME"], ctx.env_vars["SVN_PASSWORD"])

    return connector


def run_command(connector: SvnConnector, args: argparse.Namespace, stdout=sys.stdout) -> int:

    if args.command == "ls":

        parent = connector.get_root() if args.id == "/" else connector.get_node(args.id)
        if parent is None:
            print(f"{args.id}: not found", file=sys.stderr)
            return 1

        for child in connector.get_children(parent):
            stdout.write(json.dumps(child.to_dict()) + "\n")

    elif args.command == "stat":

        node = connector.get_node(args.id)
        if node is None:
            print(f"{args.id}: not found", file=sys.stderr)
            return 1

        output = node.to_dict()
        if node.type != ConnectorNodeType.FOLDER:
            content_information = connector.get_content_information(node)
            output["exists"] = content_information.exists()

        stdout.write(json.dumps(output) + "\n")

    elif args.command == "cat":

        node = connector.get_node(args.id) or ConnectorNode(args.id, type=node_type_for(NodeKind.FILE, args.id))
        content = connector.get_content(node)
        if content is None:
            print(f"{args.id}: no content", file=sys.stderr)
            return 1

        shutil.copyfileobj(content, stdout.buffer)

    elif args.command in ("mkdir", "touch"):

        if args.command == "mkdir":
            node_type = ConnectorNodeType.FOLDER
        else:
            node_type = node_type_for(NodeKind.FILE, args.name)

        node = connector.create_node(args.parent_id, join_id(args.parent_id, args.name), args.name, node_type)
        stdout.write(json.dumps(node.to_dict()) + "\n")

    elif args.command == "put":

        node = connector.get_node(args.id)
        if node is None:
            print(f"{args.id}: not found, create it with touch first", file=sys.stderr)
            return 1

        with open(args.file, "rb") as new_content:
            content_information = connector.update_content(node, new_content)

        stdout.write(json.dumps({"id": node.id, "parent_id": parent_of(node.id), "exists": content_information.exists()}) + "\n")

    elif args.command == "rm":

        connector.delete_node(ConnectorNode(args.id))

    return 0


def main(argv=None) -> int:
    """Main entry point for the svn-connector command"""

    args = build_parser().parse_args(argv)

    ### Initialization

    # Load environment variables, and initialize context with them
    ctx = Context(
            load_env.load_env_vars()
        )

    # Configure logging
    logger.configure_logger(ctx.env_vars["LOG_LEVEL"])

    # Validate env vars, now that we have logging available
    validate_env.validate_env_vars(ctx)

    config_path = args.config or ctx.env_vars["SVN_CONNECTOR_CONFIG"]

    try:

        connector = build_connector(ctx, config_path, args.connector)
        return run_command(connector, args)

    except ConnectorError as exception:

        log(ctx, f"{args.command} failed: {exception}", "error", {"command": args.command}, exception=exception)
        return 2


if __name__ == "__main__":
    sys.exit(main())
