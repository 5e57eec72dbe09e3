"""
sshdock - SSH connection launcher for PyQt6 with a click console.
"""

from setuptools import setup, find_packages
from pathlib import Path

readme = Path(__file__).parent / "README.md"
long_description = readme.read_text() if readme.exists() else ""

setup(
    name="sshdock",
    version="0.1.0",
    description="Open SSH sessions to configured servers, with port forwarding and project fast open",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4.0",
        "paramiko>=3.0.0",
        "PyYAML>=6.0",
        "click>=8.0.0",
        "pywinpty>=2.0.0; sys_platform == 'win32'",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-qt>=4.0.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "sshdock-cli=sshdock.cli:main",
        ],
        "gui_scripts": [
            "sshdock=sshdock.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Networking",
    ],
    keywords="ssh terminal pyqt6 port-forwarding paramiko",
)
