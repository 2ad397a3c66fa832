#!/usr/bin/env python
"""
Run flake8 checks and tests.
"""

import argparse
import os
import shlex
import shutil
from subprocess import check_call


def parse_args():
    parser = argparse.ArgumentParser()

    parser.add_argument('-C', '--with-coverage', action='store_true',
                        help="Generate coverage data from the tests run")
    parser.add_argument('-H', '--cover-html', action='store_true',
                        help='generate html files to see test coverage')
    return parser.parse_args()


def run(cmd, **kwargs):
    msg = 'Running: |%s|' % ' '.join(shlex.quote(c) for c in cmd)
    if kwargs.get('cwd'):
        msg += ' in %s' % kwargs['cwd']
    print(msg)
    check_call(cmd, **kwargs)


def rm(path):
    if os.path.isfile(path):
        os.unlink(path)
    elif os.path.isdir(path):
        shutil.rmtree(path)


if __name__ == '__main__':
    options = parse_args()

    here = os.path.dirname(os.path.abspath(__file__))
    os.chdir(here)

    run(['flake8', '--max-line-length=100', 'revbisect', 'tests', 'setup.py', __file__])

    if options.with_coverage:
        rm('.coverage')
        test_run_cmd = ['coverage', 'run', '--source=revbisect', '-m', 'pytest']
    else:
        test_run_cmd = ['pytest']

    run(test_run_cmd + ['tests/unit'])

    if options.with_coverage and options.cover_html:
        rm('htmlcov')
        run(['coverage', 'html'])
        print("See coverage: |%s|" % os.path.join(here, 'htmlcov', 'index.html'))
