from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class UpstreamResponse:
	"""Raw upstream reply, kept byte-for-byte so it can be relayed unchanged."""

	status_code: int
	content: bytes
	headers: dict[str, str] = field(default_factory=dict)

	@property
	def is_success(self) -> bool:
		return 200 <= self.status_code < 300

	@property
	def media_type(self) -> str:
		return self.headers.get("content-type", "application/json")


class AbstractUpstreamClient(ABC):
	"""Interface for clients that relay a request body to the upstream API."""

	@abstractmethod
	async def send(self, body: bytes) -> UpstreamResponse:
		"""Forward ``body`` verbatim and return the upstream reply.

		Args:
			body: Raw request body received from the caller.

		Returns:
			UpstreamResponse with the upstream status, body and headers,
			whatever the status code.

		Raises:
			UpstreamAppError: If the upstream cannot be reached (connection
				failure, DNS error, timeout).
		"""
		...
