"""This is the setup file"""

from setuptools import setup, find_packages

with open('README.md', 'r') as r:
    long_description = r.read()

setup(name='tmhighlight',
      version='0.3.0',
      install_requires=[
          'numpy',
          'json5',
      ],
      extras_require={
        'test': ['pytest'],
      },
      python_requires='>=3.8',
      packages=find_packages('src'),
      package_dir={'': 'src'},
      entry_points={
        'console_scripts': ['tmhighlight = tmhighlight.__main__:main'],
      },

      author='tmhighlight contributors',
      description='Render source code into themed tokens using VS Code extensions.',
      long_description=long_description,
      long_description_content_type='text/markdown',

      classifiers=[
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Development Status :: 4 - Beta',
      ]
)
