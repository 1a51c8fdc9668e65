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


class SplitPlanningException(Exception):
    """Base class of every error raised while planning splits."""


class ConfigurationException(SplitPlanningException):
    """The planning configuration is incomplete or contradictory. Raised before any network call."""


class NodeUnavailableException(SplitPlanningException):
    """A node could not be reached. Callers move on to the next candidate address."""

    def __init__(self, address: str, message: str = None):
        self.address = address
        super().__init__(message or f"Failed to connect to {address}")


class ProtocolUnsupportedException(SplitPlanningException):
    """The node does not implement the requested call."""


class ProtocolException(SplitPlanningException):
    """The node rejected a request."""


class EndpointsExhaustedException(SplitPlanningException):
    """No replica of a range could be reached."""

    def __init__(self, addresses):
        self.addresses = list(addresses)
        super().__init__(f"Failed connecting to all endpoints {','.join(self.addresses)}")


class PlanningExhaustedException(SplitPlanningException):
    """The retry budget of a planning pass is used up."""


class InvariantViolationException(SplitPlanningException):
    """The topology or the assembled splits break an invariant that must always hold."""
