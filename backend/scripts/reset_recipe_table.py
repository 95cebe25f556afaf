# backend/scripts/reset_recipe_table.py

import os
import sys

# Add the backend directory to the Python path so we can import our app modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from feedr.services.dynamodb_service import DynamoDBService


def reset_recipe_table():
    """Delete and recreate the Recipe table."""
    print("Initializing DynamoDB client...")
    service = DynamoDBService()

    try:
        print(f"Deleting table {service.table.name}...")
        service.table.delete()
        print("Waiting for table deletion...")
        service.table.wait_until_not_exists()
    except service.dynamodb.meta.client.exceptions.ResourceNotFoundException:
        print("Table did not exist.")

    service.table = service.dynamodb.Table(service.table.name)
    service.ensure_table_exists()
    print(f"Table {service.table.name} recreated with a NEW_IMAGE stream.")

if __name__ == "__main__":
    reset_recipe_table()
