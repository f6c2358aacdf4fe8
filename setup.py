from setuptools import setup

DESCRIPTION = 'Dense, column-major N-dimensional arrays for ' \
              'magnetic resonance image reconstruction.'

with open('README.md') as f:
    LONG_DESCRIPTION = f.read()

with open('mrarray/version.py') as f:
    for line in f:
        if line.startswith('version'):
            VERSION = line.split('=')[1].strip().strip('"\'')
            break

dependencies = [
    'numpy>=1.24',
    'numcodecs>=0.11',
    'donfig>=0.8',
]

setup(
    name='mrarray',
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type='text/markdown',
    extras_require={
        'test': [
            'pytest',
            'hypothesis',
        ],
    },
    python_requires='>=3.10, <4',
    install_requires=dependencies,
    package_dir={'': '.'},
    packages=['mrarray', 'mrarray.tests'],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Topic :: Scientific/Engineering :: Medical Science Apps.',
        'Operating System :: Unix',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    license='MIT',
)
