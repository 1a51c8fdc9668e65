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

import unittest
from datetime import timedelta

from pyringsplit.common.exceptions import ConfigurationException
from pyringsplit.common.options import Options
from pyringsplit.common.options.split_options import SplitOptions
from pyringsplit.common.time_utils import parse_duration
from pyringsplit.dht.partitioner import (Murmur3Partitioner,
                                         OrderPreservingPartitioner)
from pyringsplit.planner.planning_context import PlanningContext
from pyringsplit.planner.split import KeyRestriction


class OptionsTest(unittest.TestCase):

    def test_defaults(self):
        options = Options.from_none()
        self.assertEqual(9160, options.get(SplitOptions.RPC_PORT))
        self.assertEqual(65536, options.get(SplitOptions.SPLIT_SIZE))
        self.assertEqual(0, options.get(SplitOptions.MAX_THREADS))
        self.assertEqual(3, options.get(SplitOptions.MAX_RETRIES))
        self.assertEqual(timedelta(seconds=10), options.get(SplitOptions.CONNECT_TIMEOUT))
        self.assertEqual(timedelta(seconds=180), options.get(SplitOptions.REQUEST_TIMEOUT))
        self.assertIsNone(options.get(SplitOptions.KEYSPACE))

    def test_conversions(self):
        options = Options({'input.split-size': ' 128 ', 'input.request-timeout': '2 min', 'input.keyspace': ''})
        self.assertEqual(128, options.get(SplitOptions.SPLIT_SIZE))
        self.assertEqual(timedelta(minutes=2), options.get(SplitOptions.REQUEST_TIMEOUT))
        self.assertIsNone(options.get(SplitOptions.KEYSPACE))

        options.set(SplitOptions.CONNECT_TIMEOUT, timedelta(milliseconds=1500))
        self.assertEqual('1500 ms', options.to_map()['input.connect-timeout'])
        self.assertEqual(timedelta(milliseconds=1500), options.get(SplitOptions.CONNECT_TIMEOUT))

    def test_copy_is_independent(self):
        options = Options({'input.table': 'users'})
        copied = options.copy().set(SplitOptions.TABLE, 'events')
        self.assertEqual('users', options.get(SplitOptions.TABLE))
        self.assertEqual('events', copied.get(SplitOptions.TABLE))

    def test_parse_duration(self):
        self.assertEqual(1500, parse_duration('1500'))
        self.assertEqual(30000, parse_duration('30 s'))
        self.assertEqual(3600000, parse_duration('1h'))
        with self.assertRaises(ValueError):
            parse_duration('fast')
        with self.assertRaises(ValueError):
            parse_duration('3 fortnights')


class PlanningContextTest(unittest.TestCase):

    def setUp(self):
        self.conf = {
            'input.keyspace': 'ks',
            'input.table': 'users',
            'input.initial-address': '10.0.0.1, 10.0.0.2,',
            'input.partitioner': 'org.apache.cassandra.dht.Murmur3Partitioner',
        }

    def test_from_options(self):
        context = PlanningContext.from_options(self.conf)

        self.assertEqual('ks', context.keyspace)
        self.assertEqual('users', context.table)
        self.assertEqual(('10.0.0.1', '10.0.0.2'), context.seeds)
        self.assertIsInstance(context.partitioner, Murmur3Partitioner)
        self.assertEqual(9160, context.rpc_port)
        self.assertEqual(65536, context.split_size)
        self.assertIsNone(context.key_restriction)
        self.assertIsNone(context.username)

    def test_key_restriction(self):
        self.conf.update({'input.partitioner': 'OrderPreservingPartitioner',
                          'input.key-range.start-key': 'a',
                          'input.key-range.end-key': 'm'})
        context = PlanningContext.from_options(Options(self.conf))
        self.assertIsInstance(context.partitioner, OrderPreservingPartitioner)
        self.assertEqual(KeyRestriction(start_key='a', end_key='m'), context.key_restriction)

    def test_missing_settings(self):
        for key in ('input.keyspace', 'input.table', 'input.initial-address', 'input.partitioner'):
            with self.subTest(key=key):
                conf = dict(self.conf)
                del conf[key]
                with self.assertRaises(ConfigurationException) as ctx:
                    PlanningContext.from_options(conf)
                if key != 'input.table':
                    self.assertIn(key, str(ctx.exception))

    def test_invalid_settings(self):
        invalid = [
            {'input.partitioner': 'LocalPartitioner'},
            {'input.split-size': 'many'},
            {'input.split-size': '0'},
            {'input.max-threads': '-1'},
            {'input.max-retries': '-2'},
            {'input.request-timeout': '3 fortnights'},
        ]
        for overrides in invalid:
            with self.subTest(overrides=overrides):
                conf = dict(self.conf)
                conf.update(overrides)
                with self.assertRaises(ConfigurationException):
                    PlanningContext.from_options(conf)


if __name__ == '__main__':
    unittest.main()
