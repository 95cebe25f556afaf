# backend/scripts/create_state_machine.py

import argparse
import json
import os
import sys

import boto3

# Add the backend directory to the Python path so we can import our app modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from feedr.core.config import settings
from feedr.services.state_machine import TASK_FUNCTIONS, build_state_machine_definition


def deploy_state_machine(name: str, role_arn: str, function_arns: dict) -> str:
    """Create the state machine, or update its definition if it already exists."""
    client = boto3.client('stepfunctions', region_name=settings.AWS_REGION)
    definition = json.dumps(build_state_machine_definition(function_arns))

    existing = [
        machine['stateMachineArn']
        for page in client.get_paginator('list_state_machines').paginate()
        for machine in page['stateMachines']
        if machine['name'] == name
    ]
    if existing:
        client.update_state_machine(stateMachineArn=existing[0], definition=definition, roleArn=role_arn)
        print(f"Updated state machine {existing[0]}")
        return existing[0]

    response = client.create_state_machine(name=name, definition=definition, roleArn=role_arn)
    print(f"Created state machine {response['stateMachineArn']}")
    return response['stateMachineArn']


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Deploy the ProcessRecipe state machine')
    parser.add_argument('--name', default='ProcessRecipeStateMachine')
    parser.add_argument('--role-arn', required=True, help='IAM role assumed by Step Functions')
    for key in TASK_FUNCTIONS:
        parser.add_argument(f"--{key.replace('_', '-')}-arn", dest=key, required=True)
    parser.add_argument('--print', action='store_true', help='Print the definition instead of deploying')
    args = parser.parse_args()

    arns = {key: getattr(args, key) for key in TASK_FUNCTIONS}
    if args.print:
        print(json.dumps(build_state_machine_definition(arns), indent=2))
        sys.exit(0)

    arn = deploy_state_machine(args.name, args.role_arn, arns)
    print(f"Set PROCESS_RECIPE_STATE_MACHINE_ARN={arn} on the start_recipe_processing function.")
