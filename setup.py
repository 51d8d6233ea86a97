# setup.py

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="telegram-media-deserialize",
    version="1.0.0",
    author="AppleSheeple",
    author_email="",
    description="Reconstruct playable media from Telegram Desktop's serialized media cache files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/AppleSheeple/telegram-media-deserialize",
    packages=find_packages(include=["core", "utils"]),
    py_modules=["main"],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: GNU Affero General Public License v3",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Multimedia",
        "Topic :: Utilities",
    ],
    python_requires=">=3.8",
    install_requires=[
        "tqdm>=4.60.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "telegram-media-deserialize=main:main",
        ],
    },
)
