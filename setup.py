from setuptools import setup, find_packages

setup(
    name='flow_upsample',
    version='1.0.0',
    description='Bilinear upsampling of PIEH/PIEI optical flow files',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.21',
        'Pillow>=8.0',
        'click>=7.0',
    ],
    extras_require={
        'dev': ['pytest>=7.0', 'scipy>=1.7'],
    },
    entry_points={
        'console_scripts': [
            'flow-upsample=flow_upsample.cli:main',
        ],
    },
    test_suite='tests',
    tests_require=['pytest>=7.0', 'scipy>=1.7'],
)
