"""Command line front-end for declaring SmileCDR OIDC clients and identity providers.

Declarations are YAML (or JSON) files:

    resources:
      smilecdr_openid_client:
        portal:
          client_id: portal
          client_name: Patient Portal
          allowed_grant_types: [AUTHORIZATION_CODE, REFRESH_TOKEN]

State is kept in a local JSON file (see smilecdr_provider.provider.state).
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict

import yaml

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from smilecdr_provider.config import load_settings
from smilecdr_provider.core.smilecdr import SmileCdrError
from smilecdr_provider.provider import Provider, ResourceData
from smilecdr_provider.provider.schema import Field
from smilecdr_provider.provider.state import StateFile, address, split_address
from scripts import audit

DEFAULT_STATE_FILE = "smilecdr.state.json"
MASK = "(sensitive)"


def load_declarations(filename: str) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Read a declaration file and return ``{type: {name: attributes}}``."""
    with open(filename, "r", encoding="utf-8") as f:
        if filename.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)
    resources = data.get("resources")
    if not isinstance(resources, dict):
        raise ValueError(f"{filename}: top-level 'resources' mapping is required")
    return resources


def masked(schema: Dict[str, Field], values: Dict[str, Any]) -> Dict[str, Any]:
    """Copy ``values`` with sensitive attributes replaced, recursively."""
    result = {}
    for name, value in values.items():
        field = schema.get(name)
        if field is None:
            result[name] = value
        elif field.sensitive and value:
            result[name] = MASK
        elif field.is_nested and value:
            result[name] = [masked(field.elem, item) for item in value]
        else:
            result[name] = value
    return result


def _audit(args, event_type, type_name: str, d: ResourceData, key: str, success: bool = True, error: str = "") -> None:
    details = {"pid": d.get("pid")} if "pid" in d.schema else {}
    if error:
        details["error"] = error
    audit.safe_log_event(
        event_type,
        type_name,
        key,
        operator=args.operator,
        node_id=d.get("node_id") or "",
        module_id=d.get("module_id") or "",
        details=details,
        success=success,
    )


def cmd_apply(args, provider: Provider, state: StateFile) -> int:
    declarations = load_declarations(args.file)
    for type_name, instances in declarations.items():
        resource = provider.resource(type_name)
        for name, attributes in (instances or {}).items():
            addr = address(type_name, name)
            existing = state.get(addr, resource)
            if existing:
                resource.read(existing, provider.client)
                if not existing.id:
                    _audit(args, "drop", type_name, existing, existing.get(resource.natural_key_field))
                    print(f"[drop] {addr} no longer exists remotely; creating it again")
                    state.remove(addr)
                    state.save()
                    existing = None
            d = resource.new_data(attributes, id=existing.id if existing else "")
            event = "update" if existing else "create"
            key = d.get(resource.natural_key_field)
            try:
                if existing:
                    resource.carry_computed(d, existing)
                    resource.update(d, provider.client)
                else:
                    resource.create(d, provider.client)
            except SmileCdrError as e:
                print(f"[{event}] {addr}: Error: {e}", file=sys.stderr)
                _audit(args, event, type_name, d, key, success=False, error=str(e))
                if d.id:
                    state.put(addr, d)
                    state.save()
                return 1
            state.put(addr, d)
            state.save()
            _audit(args, event if d.id else "drop", type_name, d, key)
            if d.id:
                print(f"[{event}] {addr} (pid={d.get('pid')})")
            else:
                print(f"[drop] {addr} no longer exists remotely; removed from state")
    return 0


def cmd_destroy(args, provider: Provider, state: StateFile) -> int:
    type_name, _ = split_address(args.address)
    resource = provider.resource(type_name)
    d = state.get(args.address, resource)
    if d is None:
        print(f"[destroy] {args.address} is not in state", file=sys.stderr)
        return 1
    key = d.get(resource.natural_key_field)
    event = "archive" if "archived_at" in resource.schema else "delete"
    try:
        resource.delete(d, provider.client)
    except SmileCdrError as e:
        print(f"[destroy] {args.address}: Error: {e}", file=sys.stderr)
        _audit(args, event, type_name, d, key, success=False, error=str(e))
        return 1
    state.remove(args.address)
    state.save()
    _audit(args, event, type_name, d, key)
    print(f"[{event}] {args.address}")
    return 0


def cmd_import(args, provider: Provider, state: StateFile) -> int:
    resource = provider.resource(args.type)
    addr = address(args.type, args.name)
    if addr in state:
        print(f"[import] {addr} is already managed", file=sys.stderr)
        return 1
    d = resource.import_state(args.import_id, resource.new_data())
    resource.read(d, provider.client)
    if not d.id:
        print(f"[import] {args.import_id} not found in SmileCDR", file=sys.stderr)
        return 1
    state.put(addr, d)
    state.save()
    _audit(args, "import", args.type, d, d.id)
    print(f"[import] {addr} (pid={d.get('pid')})")
    return 0


def cmd_refresh(args, provider: Provider, state: StateFile) -> int:
    for addr in state:
        type_name, _ = split_address(addr)
        resource = provider.resource(type_name)
        d = state.get(addr, resource)
        key = d.get(resource.natural_key_field)
        resource.read(d, provider.client)
        state.put(addr, d)
        if not d.id:
            _audit(args, "drop", type_name, d, key)
            print(f"[drop] {addr} no longer exists remotely; removed from state")
    state.save()
    return 0


def cmd_show(args, provider: Provider, state: StateFile) -> int:
    type_name, _ = split_address(args.address)
    resource = provider.resource(type_name)
    d = state.get(args.address, resource)
    if d is None:
        print(f"[show] {args.address} is not in state", file=sys.stderr)
        return 1
    print(json.dumps(masked(resource.schema, d.to_dict()), indent=2, sort_keys=True))
    return 0


def cmd_list_clients(args, provider: Provider, state: StateFile) -> int:
    data_source = provider.data_source("smilecdr_openid_client")
    d = data_source.new_data({"node_id": args.node_id, "module_id": args.module_id})
    data_source.read(d, provider.client)
    client_schema = data_source.schema["clients"].elem
    clients = [masked(client_schema, item) for item in d.get("clients")]
    print(json.dumps(clients, indent=2, sort_keys=True))
    return 0


COMMANDS = {
    "apply": cmd_apply,
    "destroy": cmd_destroy,
    "import": cmd_import,
    "refresh": cmd_refresh,
    "show": cmd_show,
    "list-clients": cmd_list_clients,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Declarative SmileCDR OIDC client and identity provider management")
    parser.add_argument("--base-url", default=None, help="SmileCDR JSON admin endpoint (env SMILECDR_BASE_URL)")
    parser.add_argument("--username", default=None, help="Admin username (env SMILECDR_USERNAME)")
    parser.add_argument("--password", default=None, help="Admin password (env SMILECDR_PASSWORD)")
    parser.add_argument("--state-file", default=os.environ.get("SMILECDR_STATE_FILE", DEFAULT_STATE_FILE))
    parser.add_argument("--operator", default="cli", help="Operator identifier for audit logs (default: cli)")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="cmd")

    sa = sub.add_parser("apply", help="Create or update every declared resource")
    sa.add_argument("file")

    sd = sub.add_parser("destroy", help="Archive (clients) or delete (identity providers) a managed resource")
    sd.add_argument("address", help="<type>.<name>")

    si = sub.add_parser("import", help="Bring an existing SmileCDR object under management")
    si.add_argument("type")
    si.add_argument("name")
    si.add_argument("import_id", help="<key> or <node_id>/<module_id>/<key>")

    sub.add_parser("refresh", help="Re-read every managed resource and drop vanished ones")

    ss = sub.add_parser("show", help="Print the stored state of a resource")
    ss.add_argument("address")

    sl = sub.add_parser("list-clients", help="List OIDC clients of a node/module")
    sl.add_argument("--node-id", default="Master")
    sl.add_argument("--module-id", default="smart_auth")

    return parser


def main(argv=None) -> None:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = load_settings(args.base_url, args.username, args.password)
    provider = Provider.configure(config)
    if not config.is_configured and args.cmd != "show":
        parser.error("Missing SmileCDR credentials (--username/--password or SMILECDR_USERNAME/SMILECDR_PASSWORD)")

    try:
        state = StateFile(args.state_file).load()
        code = COMMANDS[args.cmd](args, provider, state)
    except (SmileCdrError, ValueError, KeyError, OSError) as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
