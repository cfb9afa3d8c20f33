"""
Sample Processes Service
Provides stock process documents users can load into the editor and adapt
"""

from typing import Dict, List, Optional
from dataclasses import dataclass

from schemas.process_model import SchemaVariant

@dataclass(frozen=True)
class SampleProcess:
    id: str
    name: str
    description: str
    format: SchemaVariant
    text: str

BOOKING_V3 = """{:format :v3,
 :transitions
 [{:name :transition/inquire,
   :actor :actor.role/customer,
   :actions [{:name :action/update-protected-data}],
   :to :state/inquiry}
  {:name :transition/request-payment,
   :actor :actor.role/customer,
   :actions
   [{:name :action/update-protected-data}
    {:name :action/create-pending-booking, :config {:type :time}}
    {:name :action/privileged-set-line-items}
    {:name :action/stripe-create-payment-intent}],
   :to :state/pending-payment,
   :privileged? true}
  {:name :transition/request-payment,
   :actor :actor.role/customer,
   :actions
   [{:name :action/update-protected-data}
    {:name :action/create-pending-booking, :config {:type :time}}
    {:name :action/privileged-set-line-items}
    {:name :action/stripe-create-payment-intent}],
   :from :state/inquiry,
   :to :state/pending-payment,
   :privileged? true}
  {:name :transition/expire-payment,
   :at
   {:fn/plus
    [{:fn/timepoint [:time/first-entered-state :state/pending-payment]}
     {:fn/period ["PT15M"]}]},
   :actions
   [{:name :action/calculate-full-refund}
    {:name :action/stripe-refund-payment}
    {:name :action/decline-booking}],
   :from :state/pending-payment,
   :to :state/payment-expired}
  {:name :transition/confirm-payment,
   :actor :actor.role/customer,
   :actions [{:name :action/stripe-confirm-payment-intent}],
   :from :state/pending-payment,
   :to :state/preauthorized}
  {:name :transition/accept,
   :actor :actor.role/provider,
   :actions
   [{:name :action/accept-booking}
    {:name :action/stripe-capture-payment-intent}],
   :from :state/preauthorized,
   :to :state/accepted}
  {:name :transition/decline,
   :actor :actor.role/provider,
   :actions
   [{:name :action/calculate-full-refund}
    {:name :action/stripe-refund-payment}
    {:name :action/decline-booking}],
   :from :state/preauthorized,
   :to :state/declined}]
 :notifications
 [{:name :notification/booking-request,
   :on :transition/confirm-payment,
   :to :actor.role/provider,
   :template :booking-new-request}
  {:name :notification/booking-accepted,
   :on :transition/accept,
   :to :actor.role/customer,
   :template :booking-request-accepted}]}
"""

PREAUTH_V2 = """;; Legacy preauthorized purchase process
{:process/id :process/preauth-with-nightly-booking
 :process/states #{:state/initial
                   :state/enquiry
                   :state/preauthorized
                   :state/accepted
                   :state/declined
                   :state/canceled
                   :state/delivered}
 :process/transitions
 [{:transition/id :transition/enquire
   :transition/from :state/initial
   :transition/to :state/enquiry
   :transition/actor :actor.role/customer}
  {:transition/id :transition/request-payment
   :transition/from #{:state/initial :state/enquiry}
   :transition/to :state/preauthorized
   :transition/actor :actor.role/customer
   :transition/actions [:action/create-booking
                        :action/calculate-tx-nightly-total-price
                        :action/stripe-create-payment-intent]
   :transition/notifications [:notification/new-booking-request]}
  {:transition/id :transition/accept
   :transition/from :state/preauthorized
   :transition/to :state/accepted
   :transition/actor :actor.role/provider
   :transition/actions [:action/accept-booking
                        :action/stripe-capture-payment-intent]
   :transition/notifications [:notification/booking-accepted]}
  {:transition/id :transition/decline
   :transition/from :state/preauthorized
   :transition/to :state/declined
   :transition/actor :actor.role/provider
   :transition/actions [:action/decline-booking
                        :action/stripe-refund-payment]}
  {:transition/id :transition/cancel
   :transition/from :state/accepted
   :transition/to :state/canceled
   :transition/actor :actor.role/operator
   :transition/actions [:action/cancel-booking
                        :action/calculate-full-refund
                        :action/stripe-refund-payment]}
  {:transition/id :transition/complete
   :transition/from :state/accepted
   :transition/to :state/delivered
   :transition/actor :system}]}
"""

class SampleProcessesService:
    """Service for looking up stock process documents"""

    def __init__(self):
        self.samples = self._load_samples()

    def _load_samples(self) -> Dict[str, SampleProcess]:
        """Load all bundled sample processes"""
        return {
            "booking-v3": SampleProcess(
                id="booking-v3",
                name="Booking with payment",
                description="Time-based booking with Stripe payment, acceptance and automatic expiry",
                format=SchemaVariant.MODERN,
                text=BOOKING_V3,
            ),
            "preauth-v2": SampleProcess(
                id="preauth-v2",
                name="Preauthorized nightly booking",
                description="Legacy process with an explicit state set and multi-source transitions",
                format=SchemaVariant.LEGACY,
                text=PREAUTH_V2,
            ),
        }

    def get_sample(self, sample_id: str) -> Optional[SampleProcess]:
        return self.samples.get(sample_id)

    def list_samples(self) -> List[SampleProcess]:
        return list(self.samples.values())

    def get_samples_by_format(self, fmt: SchemaVariant) -> List[SampleProcess]:
        return [s for s in self.samples.values() if s.format == fmt]
