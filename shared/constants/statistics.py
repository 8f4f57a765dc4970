class Statistics:
    """CloudWatch aggregate statistic names"""

    SAMPLE_COUNT = "SampleCount"
    AVERAGE = "Average"
    SUM = "Sum"
    MINIMUM = "Minimum"
    MAXIMUM = "Maximum"

    @classmethod
    def all(cls) -> list[str]:
        """Fixed statistic set requested for every metric, in request order"""
        return [cls.SAMPLE_COUNT, cls.AVERAGE, cls.SUM, cls.MINIMUM, cls.MAXIMUM]


class Units:
    """CloudWatch unit labels used by the collector"""

    SECONDS = "Seconds"
