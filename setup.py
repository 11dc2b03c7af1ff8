from setuptools import setup, find_packages

import os

install_requires = [
    "colorama",
    "tqdm",
    "stevedore>1.20.0",
    "tomlkit>=0.11.0",
    "typeguard>=4.0.0",
]

extras_require = {"test": ["pytest"]}

# Get spdx-store version from the VERSION file.
version_file = os.path.join(os.path.dirname(__file__), "VERSION")
with open(version_file) as f:
    spdx_store_version = f.read().strip()

with open(os.path.join(os.path.dirname(__file__), "README.md")) as f:
    long_description = f.read()

setup(
    name="spdx-store",
    version=spdx_store_version,
    license="Apache-2.0",
    description="Object/property store for SPDX document metadata",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires=">=3.8",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"spdx_store": ["py.typed"]},
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "spdx_store.backend": [
            "memory = spdx_store.store.backends.memory:InMemoryStore",
        ],
    },
)
