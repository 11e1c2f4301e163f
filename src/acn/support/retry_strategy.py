import threading


class RetryStrategy:
    """
    Decides how long to wait before the next attempt at an operation.
    Each call to the strategy counts as one attempt.
    """
    def __init__(self):
        self.attempts = 0
        self._lock = threading.Lock()

    def __call__(self):
        """ counts an attempt and returns the delay in seconds before it should be made """
        with self._lock:
            self.attempts += 1
        return self._delay()

    def reset(self):
        with self._lock:
            self.attempts = 0

    def _delay(self):
        return 0


class PeriodRetryStrategy(RetryStrategy):
    """
    Retries on a fixed period, forever. There is no backoff and no limit on the number of attempts.
    """

    def __init__(self, retry_period):
        """
        :param retry_period: The retry period in seconds.
        """
        super().__init__()
        if retry_period < 0:
            raise ValueError("retry period must not be negative: %s" % retry_period)
        self.retry_period = retry_period

    def _delay(self):
        return self.retry_period
