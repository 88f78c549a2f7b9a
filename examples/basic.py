"""
Example demonstrating CSV to JSON conversion.

This example:
1. Creates a test CSV file
2. Converts it in convert-only mode and prints the JSON
3. Converts it again with an in-memory store and reads the stored batch back
"""

import csv
import shutil
from pathlib import Path

from csv2json import ConversionService, MemoryRecordStore, StorePort


def create_test_csv(file_path: Path) -> Path:
    """Create a test CSV file with sample data and return the file path"""
    csv_file = file_path / 'sample.csv'
    data = [
        {'name': 'John Doe', 'age': '30', 'city': 'New York'},
        {'name': 'Jane Smith', 'age': '25', 'city': 'Los Angeles'},
        {'name': 'Bob Johnson', 'age': '35', 'city': 'Chicago'}
    ]
    with open(csv_file, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=['name', 'age', 'city'])
        writer.writeheader()
        writer.writerows(data)
    return csv_file


def main():
    """Run the example"""
    test_dir = Path("test_data")
    test_dir.mkdir(exist_ok=True)

    try:
        csv_file = create_test_csv(test_dir)
        print(f"Created test CSV file: {csv_file}")

        # Convert-only mode
        service = ConversionService(indent=2)
        print(service.convert_file(csv_file).decode('utf-8'))

        # Convert and persist
        service = ConversionService(store=StorePort.of(MemoryRecordStore()))
        result = service.process_file(csv_file)
        print(f"Stored {result.record_count} records as batch {result.batch_id}")

        stored = service.get_data_by_id(result.batch_id)
        print(f"Batch {stored.id} ({stored.name}) has columns {list(stored.records[0])}")
    finally:
        shutil.rmtree(test_dir, ignore_errors=True)


if __name__ == "__main__":
    main()
