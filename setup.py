from setuptools import setup

setup(
    name='sshdeck',
    version='0.1.0',
    description='Terminal editor and launcher for SSH config host profiles',
    packages=['sshdeck', 'sshdeck.tui'],
    python_requires='>=3.8',
    install_requires=[
        'textual>=0.47',
        'rich>=13',
    ],
    extras_require={
        'test': ['pytest>=7'],
    },
    entry_points={
        'console_scripts': [
            'sshdeck=sshdeck.tui:main',
        ],
    },
)
