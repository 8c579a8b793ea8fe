from setuptools import setup, find_packages

setup(
    name="property-container",
    version="0.1.0",
    description="Validated containers of dynamically named properties",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        'property_container': ['local-config.yaml'],
    },
    include_package_data=True,
    install_requires=[
        'pyyaml>=6.0',
        'jsonschema>=4.17.0',
        'email-validator>=2.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.9',
)
