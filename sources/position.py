# Copyright 2026 The mark-cascade Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import argparse
import json
import logging
import sys

from fontTools import configLogger

import cascade
import project
from utils import Offset


log = logging.getLogger()


def parse_offset(value):
    try:
        x, y = value.split(',')
        return Offset(float(x), float(y))
    except ValueError:
        raise argparse.ArgumentTypeError(f'expected X,Y, not {value!r}') from None


def main(args=None):
    parser = argparse.ArgumentParser(description='Position a mark on a base and propagate the change to its siblings.')
    parser.add_argument('--project', metavar='FILE', required=True, help='project snapshot in JSON')
    parser.add_argument('--base', required=True, help='base glyph name')
    parser.add_argument('--mark', required=True, help='mark glyph name')
    parser.add_argument('--offset', metavar='X,Y', type=parse_offset, help='new offset; the default offset if omitted')
    parser.add_argument('--indic-data', metavar='FILE', help='IndicPositionalCategory.txt')
    parser.add_argument('--output', metavar='FILE', help='where to write the result; standard output if omitted')
    parser.add_argument('-v', '--verbose', action='store_true', help='log debugging messages')
    options = parser.parse_args(args)

    configLogger(logger=log, level=logging.DEBUG if options.verbose else logging.INFO)

    try:
        context = project.load_project(options.project, options.indic_data)
    except (OSError, ValueError) as e:
        parser.error(str(e))
    base = context.characters.get(options.base)
    mark = context.characters.get(options.mark)
    if base is None or mark is None:
        parser.error(f'unknown character: {options.base if base is None else options.mark}')

    try:
        offset = options.offset
        if offset is None:
            offset = context.default_offset(base, mark, context.bounding_box_of(base), context.bounding_box_of(mark))
        result = cascade.apply_edit_and_cascade((base, mark), offset, None, context)
    except ValueError as e:
        log.error('%s', e)
        return 1
    log.info('%d positions propagated', result.propagated_count)

    output = {
        'markPositioning': project.dump_positioning_map(result.positioning_map),
        'glyphs': project.dump_glyphs(result.glyphs, result.baked),
    }
    if options.output:
        with open(options.output, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=2)
            f.write('\n')
    else:
        json.dump(output, sys.stdout, indent=2)
        sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
