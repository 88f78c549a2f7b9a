from setuptools import setup, find_packages

setup(
    name="csv2json",
    version="1.0.0",  # Must match csv2json.__version__
    description="Convert CSV files to JSON and optionally persist the records",
    packages=find_packages(include=['csv2json', 'csv2json.*']),
    package_data={
        'csv2json.config': ['default_config.yaml'],
    },
    python_requires='>=3.9',
    install_requires=[
        'click',
        'python-dotenv',
        'pyyaml',
        'sqlalchemy>=1.4'
    ],
    extras_require={
        'postgres': ['psycopg2-binary'],
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'csv2json=csv2json.cli:main',
        ],
    },
)
