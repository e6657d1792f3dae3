from setuptools import setup, find_packages

setup(
    name="Gwaggli_STT",
    version="0.1.0",
    description="Speech-to-text transcription of audio files and live audio streams",
    packages=find_packages(include=["gwaggli", "gwaggli.*"]),
    include_package_data=True,
    install_requires=[
        "numpy>=1.20.0",
        "scipy>=1.8.0",
        "huggingface_hub>=0.24.0",
        "colorama>=0.4.4",
    ],
    extras_require={
        "capture": [
            "pyaudio>=0.2.11",
        ],
        "whisper": [
            "faster-whisper>=1.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "black>=23.1.0",
            "isort>=5.12.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gwaggli=gwaggli.Application.Cli.cli:main",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Multimedia :: Sound/Audio :: Speech",
    ],
)
