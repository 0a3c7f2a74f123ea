from setuptools import find_packages, setup

pypi_classifiers = [
    'Programming Language :: Python :: 3',
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Operating System :: OS Independent",
    'Intended Audience :: Science/Research',
    'Natural Language :: English',
    'Topic :: Scientific/Engineering :: Bio-Informatics',
    "Topic :: Software Development :: Libraries :: Python Modules",
    'License :: OSI Approved :: MIT License',
]

desc = """Lazy, memory-bounded access to sequences stored in BLAST databases."""

setup(name='lazyblastdb',
      version='0.1.0',
      description=desc,
      license='MIT',
      package_dir={'': 'src'},
      packages=find_packages('src'),
      python_requires='>=3.8',
      install_requires=[
          'biopython>=1.80',
          'click>=8.0',
          'rich>=12.0',
      ],
      extras_require={
          'test': ['pytest>=7.0'],
      },
      classifiers=pypi_classifiers,
      keywords=["blast", "database", "sequence", "fasta"],
      include_package_data=True,
      zip_safe=False,
      entry_points={
        'console_scripts': [
            'lazyblastdb=lazyblastdb.cli:main',
        ],
    },
    )
