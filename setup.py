from setuptools import find_packages, setup

setup(
    name='sollint',
    version='0.1.0',
    description='Static checks for Solidity contracts: unused state, precision loss, unguarded selfdestruct',
    author='Ziver-opensource',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'click>=7.0',
        'rich>=9.0'
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'sollint = sollint.cli.main:cli'
        ]
    },
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
)
