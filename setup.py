from setuptools import setup, find_packages

setup(
    name="telepage",
    version="0.6.2",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests",
        "beautifulsoup4",
        "markdown",
        "Pillow"
    ],
    extras_require={
        "yaml": [
            "pyyaml"
        ],
        "dev": [
            "pytest",
            "pytest-cov"
        ]
    },
    author="zoidberg-xgd",
    author_email="",
    description="Telegraph API client with HTML and Markdown to node conversion",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.7",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords=["telegraph", "telegra.ph", "api", "html", "markdown"],
)
