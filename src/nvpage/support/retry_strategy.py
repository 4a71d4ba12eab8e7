from nvpage.support.mixins import CommonEqualityMixin


class RetryStrategy:
    def __call__(self):
        return 0


class BoundedRetryStrategy(RetryStrategy, CommonEqualityMixin):
    """
    Retries at a fixed interval until a fixed number of attempts have been made.
    Each call records one failed attempt.
    """

    def __init__(self, retry_period, max_attempts, attempts=0):
        """
        :param retry_period: The delay between attempts in seconds.
        :param max_attempts: The total number of attempts allowed, including the first.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1, not %s" % max_attempts)
        self.retry_period = retry_period
        self.max_attempts = max_attempts
        self.attempts = attempts        # failed attempts so far

    @property
    def exhausted(self):
        return self.attempts >= self.max_attempts

    def __call__(self):
        """
        records a failed attempt.
        :return: the delay before the next attempt, or None when no attempts remain.
        """
        self.attempts += 1
        return None if self.exhausted else self.retry_period
