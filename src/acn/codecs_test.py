import unittest

from hamcrest import assert_that, calling, contains_exactly, empty, equal_to, has_length, is_, none, raises

from acn.codecs import ConnectionStatus, ConnectionTableCodec, FactoryConfig, FactoryConfigCodec, LinkQuality, \
    NO_RESPONSE, PingResult, PingResultCodec, ScanResultCodec, ScanType, SlaveIdCodec, encode_ping_address, \
    encode_scan_request, mac_to_string, pack_words, short_address_to_string, string_to_mac, zero_pad
from acn.errors import ProtocolLengthError, ValidationError
from acn.protocol.master import SlaveIdResponse

MAC = bytes([0x00, 0x11, 0x22, 0x33, 0x44, 0x55, 0x66, 0x77])


def connection_entry(status, pan_id=b'\x34\x12', alt=b'\xcd\xab', mac=MAC):
    return pan_id + alt + mac + bytes([status, 0])


class HelpersTest(unittest.TestCase):

    def test_zero_pad(self):
        assert_that(zero_pad(123456789, 10), is_('0123456789'))
        assert_that(zero_pad(4294967295, 10), is_('4294967295'))

    def test_mac_round_trip(self):
        text = mac_to_string(MAC)
        assert_that(text, is_('00:11:22:33:44:55:66:77'))
        assert_that(string_to_mac(text), is_(MAC))

    def test_mac_with_offset(self):
        assert_that(mac_to_string(b'\xff\xff' + MAC, 2, 8), is_('00:11:22:33:44:55:66:77'))

    def test_string_to_mac_rejects_wrong_octet_count(self):
        assert_that(calling(string_to_mac).with_args('00:11:22'), raises(ValidationError))

    def test_string_to_mac_rejects_non_hex(self):
        assert_that(calling(string_to_mac).with_args('00:11:22:33:44:55:66:zz'), raises(ValidationError))

    def test_short_address_is_little_endian(self):
        assert_that(short_address_to_string(b'\x00\x0f\x00', 1), is_('000f'))

    def test_pack_words_rejects_out_of_range(self):
        assert_that(calling(pack_words).with_args([0x10000]), raises(ValidationError))
        assert_that(calling(pack_words).with_args([-1]), raises(ValidationError))


class FactoryConfigCodecTest(unittest.TestCase):

    def setUp(self):
        self.sut = FactoryConfigCodec()

    def test_unprogrammed(self):
        assert_that(self.sut.decode(b'\x00'), is_(none()))

    def test_single_nonzero_byte_is_a_length_error(self):
        assert_that(calling(self.sut.decode).with_args(b'\x01'), raises(ProtocolLengthError))

    def test_wrong_length(self):
        assert_that(calling(self.sut.decode).with_args(bytes(19)),
                    raises(ProtocolLengthError, r'Factory object \(19\)'))

    def test_encode_layout(self):
        data = self.sut.encode(FactoryConfig('00:11:22:33:44:55:66:77', 123456789, 2))
        assert_that(data, has_length(20))
        assert_that(data[:8], is_(MAC))
        assert_that(data[8:12], is_(bytes.fromhex('075BCD15')))
        assert_that(data[12], is_(2))
        assert_that(data[13:], is_(bytes(7)))

    def test_encode_accepts_mac_bytes(self):
        data = self.sut.encode(FactoryConfig(MAC, 1, 1))
        assert_that(data[:8], is_(MAC))

    def test_round_trip(self):
        config = FactoryConfig('00:11:22:33:44:55:66:77', 4294967295, 1)
        assert_that(self.sut.decode(self.sut.encode(config)), is_(equal_to(config)))

    def test_decoded_dictionary(self):
        config = self.sut.decode(MAC + bytes.fromhex('075BCD15') + b'\x02' + bytes(7))
        assert_that(config.as_dict(), is_({'macAddress': '00:11:22:33:44:55:66:77',
                                           'serialNumber': 123456789,
                                           'productType': 2}))

    def test_encode_validation(self):
        invalid = [
            FactoryConfig(MAC[:7], 1, 1),
            FactoryConfig(None, 1, 1),
            FactoryConfig(MAC, -1, 1),
            FactoryConfig(MAC, 1 << 32, 1),
            FactoryConfig(MAC, None, 1),
            FactoryConfig(MAC, 1, None),
            FactoryConfig(MAC, 1, 256),
        ]
        for config in invalid:
            assert_that(calling(self.sut.encode).with_args(config), raises(ValidationError))


class ConnectionStatusTest(unittest.TestCase):

    def test_decode_0x8b(self):
        status = ConnectionStatus.from_byte(0x8B)
        assert_that(status.as_dict(), is_({
            'rxOnWhenIdle': True,
            'directConnection': True,
            'longAddressValid': False,
            'shortAddressValid': True,
            'finishJoin': False,
            'isFamily': False,
            'isValid': True,
        }))

    def test_bit_6_is_ignored(self):
        assert_that(ConnectionStatus.from_byte(0x40).to_byte(), is_(0))


class ConnectionTableCodecTest(unittest.TestCase):

    def setUp(self):
        self.sut = ConnectionTableCodec()

    def test_empty_table(self):
        assert_that(self.sut.decode(b''), is_(empty()))

    def test_length_not_multiple_of_entry(self):
        for length in (1, 13, 15, 27):
            assert_that(calling(self.sut.decode).with_args(bytes(length)), raises(ProtocolLengthError))

    def test_valid_entry_decoded(self):
        entries = self.sut.decode(connection_entry(0x87))
        assert_that(entries, has_length(1))
        entry = entries[0]
        assert_that(entry.pan_id, is_('1234'))
        assert_that(entry.alt_address, is_('abcd'))
        assert_that(entry.address, is_('00:11:22:33:44:55:66:77'))
        assert_that(entry.extra, is_(0x87))
        assert_that(entry.status, is_(ConnectionStatus(rx_on_when_idle=True, direct_connection=True,
                                                        long_address_valid=True, short_address_valid=False,
                                                        finish_join=False, is_family=False, is_valid=True)))

    def test_invalid_entries_are_filtered(self):
        entries = self.sut.decode(connection_entry(0x8B) + connection_entry(0x0B))
        assert_that(entries, has_length(1))
        assert_that(entries[0].status.is_valid, is_(True))

    def test_each_entry_reads_its_own_address(self):
        other = bytes(range(8))
        entries = self.sut.decode(connection_entry(0x80) + connection_entry(0x80, mac=other))
        assert_that([e.address for e in entries],
                    contains_exactly('00:11:22:33:44:55:66:77', '00:01:02:03:04:05:06:07'))


class PingResultCodecTest(unittest.TestCase):

    def setUp(self):
        self.sut = PingResultCodec()

    def test_short_responses_are_no_response(self):
        for length in range(7):
            result = self.sut.decode(bytes(length))
            assert_that(result, is_(NO_RESPONSE))
            assert_that(result.responded, is_(False))
            assert_that(result.as_dict(), is_({'error': 'No Response'}))

    def test_decode(self):
        result = self.sut.decode(bytes([0x00, 0x01, 0x02, 200, 0xD0, 180, 0xC0]))
        assert_that(result, is_(PingResult(0x0102, LinkQuality(200, 0xD0), LinkQuality(180, 0xC0))))
        assert_that(result.as_dict(), is_({'rtt': 258, 'fwd': {'lqi': 200, 'rssi': 208},
                                           'rev': {'lqi': 180, 'rssi': 192}}))

    def test_encode_address(self):
        assert_that(encode_ping_address(0xABCD), is_(b'\xab\xcd'))
        assert_that(calling(encode_ping_address).with_args(0x10000), raises(ValidationError))


class ScanResultCodecTest(unittest.TestCase):

    def test_decode(self):
        result = ScanResultCodec().decode(bytes([15, 1, 2, 3]))
        assert_that(result.best_channel, is_(15))
        assert_that(result.noise, is_(bytes([1, 2, 3])))

    def test_empty(self):
        assert_that(calling(ScanResultCodec().decode).with_args(b''), raises(ProtocolLengthError))

    def test_encode_request(self):
        assert_that(encode_scan_request(ScanType.ENERGY, 2), is_(b'\x01\x02'))
        assert_that(encode_scan_request(2, 0), is_(b'\x02\x00'))

    def test_encode_request_validation(self):
        assert_that(calling(encode_scan_request).with_args(4, 1), raises(ValidationError))
        assert_that(calling(encode_scan_request).with_args(ScanType.BOTH, 256), raises(ValidationError))


class SlaveIdCodecTest(unittest.TestCase):

    def test_decode(self):
        response = SlaveIdResponse(product=2, run=1, version='1.2.3', values=bytes.fromhex('075BCD15'))
        result = SlaveIdCodec().decode(response)
        assert_that(result.as_dict(), is_({'product': 2, 'productType': 'Fob', 'run': 1, 'version': '1.2.3',
                                           'serialNumber': '0123456789', 'fault': 'None'}))

    def test_unprogrammed(self):
        response = SlaveIdResponse(product=7, run=0, version='0', values=bytes(4))
        result = SlaveIdCodec().decode(response)
        assert_that(result.product_type, is_('Unknown'))
        assert_that(result.fault, is_('Unprogrammed'))
        assert_that(result.serial_number, is_('0000000000'))

    def test_short_values(self):
        response = SlaveIdResponse(product=1, run=1, version='0', values=b'\x01')
        assert_that(calling(SlaveIdCodec().decode).with_args(response), raises(ProtocolLengthError))
