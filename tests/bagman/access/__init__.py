from unittest import TestLoader, TestSuite

def additional_tests():
    from . import test_bag, test_checksum, test_payload, test_exceptions

    suites = [TestLoader().loadTestsFromModule(m[1])
                     for m in list(locals().items()) if m[0].startswith("test_")]
    return TestSuite(suites)
