"""SSM Parameter Store client wrapper."""
import logging
from typing import Dict, Iterable, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import SecretStoreUnavailable
from .models import ResolvedSecret, SecretRef

logger = logging.getLogger(__name__)

# GetParameters accepts at most 10 names per call
MAX_NAMES_PER_CALL = 10


def unique_locators(refs: Iterable[SecretRef]) -> List[str]:
    """Distinct locators, in order of first occurrence."""
    return list(dict.fromkeys(ref.source_locator for ref in refs))


def is_parameter_locator(locator: str) -> bool:
    """
    Whether SSM can answer for a locator.

    Parameter names and SSM parameter ARNs qualify; ARNs of other services
    (e.g. arn:aws:secretsmanager:...) do not.
    """
    if not locator.startswith("arn:"):
        return True
    parts = locator.split(":", 3)
    return len(parts) > 2 and parts[2] == "ssm"


class SsmSecretResolver:
    """Wrapper around the boto3 SSM client."""

    def __init__(self, session: Optional[boto3.session.Session] = None, client=None):
        self._session = session
        self._client = client

    @property
    def client(self):
        """Lazy-initialize client."""
        if self._client is None:
            session = self._session or boto3.session.Session()
            self._client = session.client("ssm")
        return self._client

    def _get_parameters(self, names: List[str]) -> List[Dict]:
        try:
            response = self.client.get_parameters(Names=names, WithDecryption=True)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "ClientError")
            raise SecretStoreUnavailable(f"Failed to fetch parameters ({code}): {e}") from e
        except BotoCoreError as e:
            raise SecretStoreUnavailable(f"Failed to fetch parameters: {e}") from e

        invalid = response.get("InvalidParameters", [])
        if invalid:
            logger.debug(f"Parameters not returned by SSM: {', '.join(invalid)}")
        return response.get("Parameters", [])

    def resolve_batch(self, refs: Iterable[SecretRef]) -> List[ResolvedSecret]:
        """
        Resolve secret references to values, decrypting SecureStrings.

        Args:
            refs: Secret references; duplicate locators are fetched once

        Returns:
            One ResolvedSecret per locator SSM returned, in request order.
            Locators SSM does not return (deleted, inaccessible) and
            locators of other services are absent.

        Raises:
            SecretStoreUnavailable: On transport, auth or API failure
        """
        locators = unique_locators(refs)
        foreign = [loc for loc in locators if not is_parameter_locator(loc)]
        if foreign:
            logger.debug(f"Not parameter store locators, left unresolved: {', '.join(foreign)}")
        requested = [loc for loc in locators if is_parameter_locator(loc)]
        if not requested:
            return []

        # A locator may be a parameter name or a parameter ARN
        values: Dict[str, str] = {}
        for start in range(0, len(requested), MAX_NAMES_PER_CALL):
            chunk = requested[start:start + MAX_NAMES_PER_CALL]
            for parameter in self._get_parameters(chunk):
                value = parameter.get("Value")
                if not isinstance(value, str):
                    continue
                for key in (parameter.get("Name"), parameter.get("ARN")):
                    if key:
                        values[key] = value

        resolved = [
            ResolvedSecret(source_locator=locator, value=values[locator])
            for locator in requested
            if locator in values
        ]
        logger.info(f"Resolved {len(resolved)} of {len(locators)} parameters")
        return resolved
