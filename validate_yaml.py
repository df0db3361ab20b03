#!/usr/bin/env python3
"""Validate fleet data files against the schema."""
import argparse
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_references(data: dict) -> list[str]:
    """Cross-record checks the schema cannot express. Returns list of errors."""
    errors = []
    for key in ("customers", "vehicles", "mileageLogs", "serviceSchedules"):
        ids = [record["id"] for record in data[key]]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            errors.append(f"Duplicate {key} ids: {duplicates}")

    customer_ids = {c["id"] for c in data["customers"]}
    vehicle_ids = {v["id"] for v in data["vehicles"]}
    vins = [v["vin"] for v in data["vehicles"]]
    for vin in sorted({v for v in vins if vins.count(v) > 1}):
        errors.append(f"Duplicate VIN: {vin}")

    for vehicle in data["vehicles"]:
        if vehicle["customerId"] not in customer_ids:
            errors.append(f"Vehicle {vehicle['id']} references unknown customer {vehicle['customerId']}")
    for log in data["mileageLogs"]:
        if log["vehicleId"] not in vehicle_ids:
            errors.append(f"Mileage log {log['id']} references unknown vehicle {log['vehicleId']}")
    return errors


def validate_fleet_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single fleet YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
        errors.extend(check_references(data))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the given fleet data files (default: data/*.yaml)."""
    parser = argparse.ArgumentParser(description="Validate fleet data files")
    parser.add_argument("files", nargs="*", type=Path, help="Fleet YAML files to check")
    args = parser.parse_args(argv)

    schema = load_schema()
    yaml_files = args.files
    if not yaml_files:
        data_dir = Path(__file__).parent / "data"
        if not data_dir.exists():
            print(f"Error: data directory not found: {data_dir}")
            return 1
        yaml_files = list(data_dir.glob("*.yaml")) + list(data_dir.glob("*.yml"))

    if not yaml_files:
        print("Warning: No YAML files found")
        return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_fleet_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
