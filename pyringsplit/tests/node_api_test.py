################################################################################
#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
# limitations under the License.
################################################################################

import random
import unittest

from pyringsplit.api.api_response import CfSplitEntry
from pyringsplit.api.node_api import NodeApi
from pyringsplit.common.exceptions import (NodeUnavailableException,
                                           ProtocolException,
                                           ProtocolUnsupportedException)
from pyringsplit.planner.node_connector import NodeConnector
from pyringsplit.planner.planning_context import PlanningContext
from pyringsplit.planner.split_assembler import SplitAssembler
from pyringsplit.planner.split_planner import SplitPlanner
from pyringsplit.tests.node_server import (MockNodeServer, options_for,
                                           ring_entry)

UNREACHABLE = '127.0.0.2'


def _halves(table, request):
    if int(request.start_token) >= int(request.end_token):
        return [CfSplitEntry(request.start_token, request.end_token, request.keys_per_split)]
    middle = str((int(request.start_token) + int(request.end_token)) // 2)
    return [CfSplitEntry(request.start_token, middle, request.keys_per_split),
            CfSplitEntry(middle, request.end_token, request.keys_per_split)]


class NodeApiTest(unittest.TestCase):
    """Runs the node calls over HTTP against a local mock node."""

    def setUp(self):
        self.ring = [
            ring_entry('0', '100', ['10.0.0.1'], ['127.0.0.1']),
            ring_entry('100', '0', ['10.0.0.2'], ['127.0.0.1']),
        ]
        self.server = MockNodeServer('ks', self.ring, splits_function=_halves,
                                     tokens_function=lambda table, request: [request.start_token,
                                                                             request.end_token])
        self.server.start()

    def tearDown(self):
        self.server.shutdown()

    def _context(self, seeds='127.0.0.1', **overrides) -> PlanningContext:
        return PlanningContext.from_options(options_for(self.server, seeds, **overrides))

    def _planner(self, context) -> SplitPlanner:
        return SplitPlanner(context,
                            assembler=SplitAssembler(context.partitioner, resolve_hostname=str),
                            rng=random.Random(3))

    def test_describe_ring(self):
        with NodeConnector(self._context()).connect('127.0.0.1') as api:
            entries = api.describe_ring('ks')

        self.assertEqual(2, len(entries))
        self.assertEqual('100', entries[1].start_token)
        self.assertEqual(['10.0.0.2'], entries[1].endpoints)
        self.assertEqual(['127.0.0.1'], entries[1].rpc_endpoints)

    def test_describe_splits(self):
        with NodeConnector(self._context()).connect('127.0.0.1') as api:
            sized = api.describe_splits_ex('users', '0', '100', 10)
            tokens = api.describe_splits('users', '0', '100', 10)

        self.assertEqual([('0', '50', 10), ('50', '100', 10)],
                         [(e.start_token, e.end_token, e.row_count) for e in sized])
        self.assertEqual(['0', '100'], tokens)

    def test_unknown_keyspace_is_rejected(self):
        with self.assertRaises(ProtocolException):
            NodeConnector(self._context(**{'input.keyspace': 'missing'})).connect('127.0.0.1')

    def test_split_call_without_keyspace(self):
        api = NodeApi('127.0.0.1', self.server.port)
        try:
            with self.assertRaises(ProtocolException):
                api.describe_splits_ex('users', '0', '100', 10)
        finally:
            api.close()

    def test_missing_sized_split_call(self):
        self.server.splits_function = None
        with NodeConnector(self._context()).connect('127.0.0.1') as api:
            with self.assertRaises(ProtocolUnsupportedException):
                api.describe_splits_ex('users', '0', '100', 10)

    def test_unreachable_node(self):
        with self.assertRaises(NodeUnavailableException):
            NodeConnector(self._context()).connect(UNREACHABLE)

    def test_login(self):
        self.server.credentials = ('planner', 'secret')
        context = self._context(**{'input.keyspace.username': 'planner',
                                   'input.keyspace.password': 'secret'})
        with NodeConnector(context).connect('127.0.0.1') as api:
            self.assertEqual(2, len(api.describe_ring('ks')))
        self.assertEqual(('POST', '/v1/login'), self.server.requests[0])

    def test_login_required(self):
        self.server.credentials = ('planner', 'secret')
        with self.assertRaises(ProtocolException):
            NodeConnector(self._context()).connect('127.0.0.1')
        with self.assertRaises(ProtocolException):
            NodeConnector(self._context(**{'input.keyspace.username': 'planner',
                                           'input.keyspace.password': 'wrong'})).connect('127.0.0.1')

    def test_plan(self):
        splits = self._planner(self._context(**{'input.split-size': '10'})).plan()

        bounds = sorted((int(s.start_token), int(s.end_token)) for s in splits)
        self.assertEqual([(-2 ** 63, 0), (0, 50), (50, 100), (100, 2 ** 63 - 1)], bounds)
        for split in splits:
            self.assertEqual(10, split.get_length())
            self.assertEqual(['127.0.0.1'], split.get_locations())

    def test_plan_falls_back_to_boundary_tokens(self):
        self.server.splits_function = None
        splits = self._planner(self._context(**{'input.split-size': '10'})).plan()

        bounds = sorted((int(s.start_token), int(s.end_token)) for s in splits)
        self.assertEqual([(-2 ** 63, 0), (0, 100), (100, 2 ** 63 - 1)], bounds)
        paths = [path for _, path in self.server.requests]
        self.assertIn('/v1/keyspaces/ks/tables/users/splits', paths)
        self.assertIn('/v1/keyspaces/ks/tables/users/split-tokens', paths)

    def test_plan_skips_unreachable_seed(self):
        splits = self._planner(self._context(seeds=f'{UNREACHABLE},127.0.0.1')).plan()
        self.assertEqual(4, len(splits))

    def test_plan_with_unreachable_seeds(self):
        with self.assertRaises(NodeUnavailableException):
            self._planner(self._context(seeds=UNREACHABLE)).plan()


if __name__ == '__main__':
    unittest.main()
